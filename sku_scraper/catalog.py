"""Filter catalog: which catalog pages to scrape and under which key."""

from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path

import structlog

from .config.models import DEFAULT_PAGE_QUERY_SUFFIX
from .errors import FormatError
from .tabular import has_key_header, read_rows

MIN_FILTER_COLUMNS = 3


@dataclass(frozen=True, order=True, slots=True)
class FilterKey:
    """Composite (group, filter) key identifying one record row."""

    group: str
    filter: str

    @classmethod
    def of(cls, group: str, filter_name: str) -> "FilterKey":
        return cls(group.strip(), filter_name.strip())

    @classmethod
    def from_row(cls, row: list[str]) -> "FilterKey":
        group = row[0] if len(row) > 0 else ""
        filter_name = row[1] if len(row) > 1 else ""
        return cls.of(group, filter_name)

    def __str__(self) -> str:
        return f"{self.group} / {self.filter}"


@dataclass(frozen=True, slots=True)
class FilterDefinition:
    key: FilterKey
    url: str


class FilterCatalog:
    """Load filter definitions from the filter-site CSV and build query URLs."""

    def __init__(
        self,
        page_query_suffix: str = DEFAULT_PAGE_QUERY_SUFFIX,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.page_query_suffix = page_query_suffix
        self.logger = logger or structlog.get_logger("sku_scraper.catalog")

    def load(self, path: Path) -> dict[FilterKey, str]:
        """Return an insertion-ordered mapping of filter key to query URL.

        Raises ``FormatError`` when the file cannot be read or its first two
        header columns are not ``Group`` and ``Filter``. Data rows with fewer
        than three columns are skipped.
        """

        try:
            rows = read_rows(path)
        except OSError as exc:
            raise FormatError(path, f"Unable to read filter links: {exc}") from exc
        except (UnicodeDecodeError, csv.Error) as exc:
            raise FormatError(path, f"Unable to parse filter links: {exc}") from exc
        if not rows:
            raise FormatError(path, "Filter link file is empty")
        if not has_key_header(rows[0]):
            raise FormatError(
                path, "Unexpected header format, expected 'Group' and 'Filter' as first columns"
            )

        links: dict[FilterKey, str] = {}
        skipped = 0
        for row in rows[1:]:
            if len(row) < MIN_FILTER_COLUMNS:
                skipped += 1
                continue
            links[FilterKey.from_row(row)] = self.build_url(row[2])
        self.logger.info("filter_catalog_loaded", path=str(path), filters=len(links), skipped=skipped)
        return links

    def definitions(self, path: Path) -> list[FilterDefinition]:
        return [FilterDefinition(key, url) for key, url in self.load(path).items()]

    def build_url(self, base_url: str) -> str:
        return base_url.strip() + self.page_query_suffix


__all__ = ["FilterCatalog", "FilterDefinition", "FilterKey"]
