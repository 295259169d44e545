from __future__ import annotations

from pathlib import Path

import pytest

from sku_scraper.catalog import FilterCatalog, FilterDefinition, FilterKey
from sku_scraper.errors import FormatError


def test_catalog_builds_ordered_urls(write_csv) -> None:
    path = write_csv(
        "FilterSites.csv",
        [
            ["Group", "Filter", "URL", "Comment"],
            ["Jackets", "Winter", "https://shop.example/c?f=winter", "ignored"],
            [" Trousers ", " Work, heavy ", " https://shop.example/c?f=work "],
            ["Gloves", "Cold"],
        ],
    )
    links = FilterCatalog().load(path)
    assert list(links.items()) == [
        (FilterKey("Jackets", "Winter"), "https://shop.example/c?f=winter&page=30"),
        (FilterKey("Trousers", "Work, heavy"), "https://shop.example/c?f=work&page=30"),
    ]


def test_catalog_header_is_case_insensitive(write_csv) -> None:
    path = write_csv("f.csv", [[" group", "FILTER ", "url"], ["A", "B", "https://x/?q=1"]])
    assert FilterCatalog(page_query_suffix="&page=99").load(path) == {
        FilterKey("A", "B"): "https://x/?q=1&page=99"
    }


def test_catalog_rejects_unexpected_header(write_csv) -> None:
    path = write_csv("f.csv", [["Filter", "Group", "URL"], ["A", "B", "https://x"]])
    with pytest.raises(FormatError) as info:
        FilterCatalog().load(path)
    assert info.value.path == path


def test_catalog_rejects_empty_file(write_csv) -> None:
    path = write_csv("f.csv", [])
    with pytest.raises(FormatError):
        FilterCatalog().load(path)


def test_catalog_missing_file_is_format_error(tmp_path: Path) -> None:
    with pytest.raises(FormatError):
        FilterCatalog().load(tmp_path / "missing.csv")


def test_catalog_duplicate_key_keeps_position_and_latest_url(write_csv) -> None:
    path = write_csv(
        "f.csv",
        [
            ["Group", "Filter", "URL"],
            ["A", "One", "https://x/1"],
            ["B", "Two", "https://x/2"],
            ["A", "One", "https://x/1b"],
        ],
    )
    definitions = FilterCatalog().definitions(path)
    assert definitions == [
        FilterDefinition(FilterKey("A", "One"), "https://x/1b&page=30"),
        FilterDefinition(FilterKey("B", "Two"), "https://x/2&page=30"),
    ]


def test_filter_key_trims_and_compares_by_value() -> None:
    assert FilterKey.of("  A ", "B  ") == FilterKey("A", "B")
    assert FilterKey.from_row(["A"]) == FilterKey("A", "")
    assert str(FilterKey("A", "B")) == "A / B"


def test_catalog_non_utf8_is_format_error(tmp_path: Path) -> None:
    path = tmp_path / "FilterSites.csv"
    path.write_bytes("Group,Filter,URL\nJakkar,V\xe9tur,https://x\n".encode("latin-1"))
    with pytest.raises(FormatError) as info:
        FilterCatalog().load(path)
    assert info.value.path == path
