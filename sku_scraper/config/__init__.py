"""Configuration package exports."""

from .loader import ConfigLocator, ConfigRepository
from .models import ExtractSettings, FetchSettings, RecordSettings, ScraperConfig

__all__ = [
    "ConfigLocator",
    "ConfigRepository",
    "ExtractSettings",
    "FetchSettings",
    "RecordSettings",
    "ScraperConfig",
]
