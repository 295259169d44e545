"""Shared fixtures for SKU scraper tests."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Callable, Iterable, Sequence

import pytest

from sku_scraper.config import (
    ConfigLocator,
    ConfigRepository,
    ExtractSettings,
    FetchSettings,
    RecordSettings,
    ScraperConfig,
)

FILTER_HEADER = ["Group", "Filter", "URL"]
RECORD_HEADER = ["Group", "Filter", "Notes", "SKUs (Jan '25)"]


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[[str, Iterable[Sequence[str]]], Path]:
    def _writer(name: str, rows: Iterable[Sequence[str]]) -> Path:
        path = tmp_path / name
        with path.open("w", encoding="utf-8", newline="") as stream:
            writer = csv.writer(stream)
            for row in rows:
                writer.writerow(row)
        return path

    return _writer


@pytest.fixture
def read_csv() -> Callable[[Path], list[list[str]]]:
    def _reader(path: Path) -> list[list[str]]:
        with path.open("r", encoding="utf-8", newline="") as stream:
            return [row for row in csv.reader(stream)]

    return _reader


@pytest.fixture
def sample_config() -> Callable[..., ScraperConfig]:
    def _builder(**overrides: Any) -> ScraperConfig:
        base: dict[str, Any] = {
            "page_query_suffix": "&page=30",
            "enable_progress_bar": False,
            "fetch": FetchSettings(timeout=5, delay_range=(0, 0)),
            "extract": ExtractSettings(),
            "record": RecordSettings(filters_path="FilterSites.csv", record_path="Filters.csv"),
        }
        base.update(overrides)
        return ScraperConfig(**base)

    return _builder


@pytest.fixture
def temp_config_repository(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> ConfigRepository:
    monkeypatch.setenv("SKU_SCRAPER_HOME", str(tmp_path))
    locator = ConfigLocator(project_root=tmp_path)
    return ConfigRepository(locator)


@pytest.fixture
def catalog_page() -> Callable[..., str]:
    def _page(*span_texts: str) -> str:
        spans = "".join(
            f"<article><div><div><span>{text}</span></div></div></article>" for text in span_texts
        )
        return f"<html><body><main>{spans}</main></body></html>"

    return _page
