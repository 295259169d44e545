"""Pydantic models describing a SKU scraper run."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_PAGE_QUERY_SUFFIX = "&page=30"
DEFAULT_SELECTOR = "article div div span"
DEFAULT_SKU_PATTERN = r"\d{4}"
DEFAULT_SKU_COLUMN_PREFIX = "SKUs"
DEFAULT_BACKUP_SUFFIX = ".bak"


class FetchSettings(BaseModel):
    """HTTP client options for retrieving filter pages."""

    timeout: float = 15.0
    user_agent: str | None = None
    follow_redirects: bool = True
    delay_range: tuple[float, float] = (0.0, 0.0)

    @field_validator("delay_range", mode="before")
    @classmethod
    def _coerce_delay(cls, value: Any) -> tuple[float, float]:
        if value in (None, ""):
            return (0.0, 0.0)
        if isinstance(value, (list, tuple)) and len(value) == 2:
            low, high = float(value[0]), float(value[1])
            if low < 0 or high < 0:
                raise ValueError("Delay range values must be non-negative")
            if high < low:
                raise ValueError("Delay range upper bound must be >= lower bound")
            return (low, high)
        raise ValueError("Delay range expects a two-item list or tuple")

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be > 0")
        return value


class ExtractSettings(BaseModel):
    """Where identifiers live in a catalog page and what they look like."""

    selector: str = DEFAULT_SELECTOR
    sku_pattern: str = DEFAULT_SKU_PATTERN

    @field_validator("sku_pattern")
    @classmethod
    def _compile_pattern(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"Invalid sku_pattern: {exc}") from exc
        return value

    @model_validator(mode="after")
    def _validate_selector(self) -> "ExtractSettings":
        if not self.selector.strip():
            raise ValueError("selector cannot be empty")
        return self


class RecordSettings(BaseModel):
    """Locations and naming conventions of the CSV inputs."""

    filters_path: Path = Field(default=Path("FilterSites.csv"))
    record_path: Path = Field(default=Path("Filters.csv"))
    sku_column_prefix: str = DEFAULT_SKU_COLUMN_PREFIX
    backup_suffix: str = DEFAULT_BACKUP_SUFFIX
    # Used when the operator asks for a fresh dated column.
    column_label_format: str = "{prefix} ({label})"

    @field_validator("filters_path", "record_path", mode="before")
    @classmethod
    def _coerce_path(cls, value: Any) -> Path:
        return Path(value)

    @model_validator(mode="after")
    def _validate_names(self) -> "RecordSettings":
        if not self.sku_column_prefix.strip():
            raise ValueError("sku_column_prefix cannot be empty")
        if not self.backup_suffix:
            raise ValueError("backup_suffix cannot be empty")
        if "{label}" not in self.column_label_format:
            raise ValueError("column_label_format must contain '{label}'")
        return self

    def column_name(self, label: str) -> str:
        return self.column_label_format.format(prefix=self.sku_column_prefix, label=label)


class ScraperConfig(BaseModel):
    """Top level configuration handed to catalog, store and fetcher."""

    page_query_suffix: str = DEFAULT_PAGE_QUERY_SUFFIX
    enable_progress_bar: bool = True
    fetch: FetchSettings = Field(default_factory=FetchSettings)
    extract: ExtractSettings = Field(default_factory=ExtractSettings)
    record: RecordSettings = Field(default_factory=RecordSettings)

    def resolved_filters_path(self, base_dir: Path) -> Path:
        return _resolve(self.record.filters_path, base_dir)

    def resolved_record_path(self, base_dir: Path) -> Path:
        return _resolve(self.record.record_path, base_dir)


def _resolve(path: Path, base_dir: Path) -> Path:
    if not path.is_absolute():
        return (base_dir / path).resolve()
    return path


__all__ = [
    "DEFAULT_BACKUP_SUFFIX",
    "DEFAULT_PAGE_QUERY_SUFFIX",
    "DEFAULT_SELECTOR",
    "DEFAULT_SKU_COLUMN_PREFIX",
    "DEFAULT_SKU_PATTERN",
    "ExtractSettings",
    "FetchSettings",
    "RecordSettings",
    "ScraperConfig",
]
