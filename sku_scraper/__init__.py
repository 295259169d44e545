"""Scrape catalog filter pages for SKUs and merge them into a master CSV record."""

__version__ = "1.2.0"
