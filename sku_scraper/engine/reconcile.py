"""Merge freshly scraped SKUs into the identifier cells of the master record.

The record is append-only per filter: an identifier that vanishes from a live
catalog page is never removed from its row. Merged cells are deduplicated and
sorted lexically (string order, so ``"2000"`` sorts before ``"300"``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Mapping, Sequence

import structlog

from ..catalog import FilterKey

if TYPE_CHECKING:
    from ..store import MasterRecord

CELL_DELIMITER = ", "
_SPLIT_PATTERN = re.compile(r",\s*")


@dataclass(frozen=True, slots=True)
class MergeResult:
    merged_cell: str
    changed: bool
    added: tuple[str, ...] = ()


@dataclass(slots=True)
class RowChange:
    """One record row whose identifier set grew during a merge."""

    row_index: int
    key: FilterKey
    added: tuple[str, ...]
    merged_cell: str


@dataclass(slots=True)
class ApplyResult:
    changes: list[RowChange] = field(default_factory=list)
    rows_seen: int = 0

    @property
    def rows_changed(self) -> int:
        return len(self.changes)


def parse_cell(cell: str) -> set[str]:
    """Split a delimited cell into trimmed, non-empty identifiers."""

    if not cell or not cell.strip():
        return set()
    return {part.strip() for part in _SPLIT_PATTERN.split(cell.strip()) if part.strip()}


def parse_identifiers(identifiers: Iterable[str]) -> set[str]:
    result: set[str] = set()
    for item in identifiers:
        result.update(parse_cell(item))
    return result


def format_cell(identifiers: Iterable[str]) -> str:
    return CELL_DELIMITER.join(sorted(identifiers))


def merge(existing_cell: str, new_identifiers: Iterable[str]) -> MergeResult:
    """Union ``new_identifiers`` into ``existing_cell``.

    ``changed`` is True only when the set grew; merging the same data twice
    yields no further change.
    """

    existing = parse_cell(existing_cell)
    merged = existing | parse_identifiers(new_identifiers)
    added = tuple(sorted(merged - existing))
    return MergeResult(merged_cell=format_cell(merged), changed=len(merged) > len(existing), added=added)


class ReconciliationEngine:
    """Apply :func:`merge` to every row of a loaded master record."""

    def __init__(self, logger: structlog.BoundLogger | None = None) -> None:
        self.logger = logger or structlog.get_logger("sku_scraper.reconcile")

    def merge(self, existing_cell: str, new_identifiers: Iterable[str]) -> MergeResult:
        return merge(existing_cell, new_identifiers)

    def apply(
        self,
        record: "MasterRecord",
        scrape_result: Mapping[FilterKey, Sequence[str]],
        column_index: int,
    ) -> ApplyResult:
        """Merge scrape results into ``record`` in place.

        Rows without a scrape result keep their identifiers. Rows shorter than
        ``column_index + 1`` are padded with empty cells first.
        """

        result = ApplyResult()
        for row_index, row in enumerate(record.rows):
            result.rows_seen += 1
            key = FilterKey.from_row(row)
            if len(row) <= column_index:
                row.extend([""] * (column_index + 1 - len(row)))
            outcome = merge(row[column_index], scrape_result.get(key, ()))
            row[column_index] = outcome.merged_cell
            if outcome.changed:
                self.logger.info(
                    "row_skus_added",
                    filter_group=key.group,
                    filter_name=key.filter,
                    added=list(outcome.added),
                )
                result.changes.append(
                    RowChange(
                        row_index=row_index,
                        key=key,
                        added=outcome.added,
                        merged_cell=outcome.merged_cell,
                    )
                )
        return result


__all__ = [
    "ApplyResult",
    "CELL_DELIMITER",
    "MergeResult",
    "ReconciliationEngine",
    "RowChange",
    "format_cell",
    "merge",
    "parse_cell",
    "parse_identifiers",
]
