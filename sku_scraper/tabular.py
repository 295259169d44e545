"""Quoting-aware CSV reading and writing shared by catalog and record store."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, Sequence


def read_rows(path: Path) -> list[list[str]]:
    """Read every row of a UTF-8 CSV file; a leading BOM is ignored."""

    with path.open("r", encoding="utf-8-sig", newline="") as stream:
        return [list(row) for row in csv.reader(stream)]


def write_rows(path: Path, rows: Iterable[Sequence[str]]) -> None:
    """Write rows with every field quoted and ``\\n`` line endings."""

    with path.open("w", encoding="utf-8", newline="") as stream:
        writer = csv.writer(stream, quoting=csv.QUOTE_ALL, lineterminator="\n")
        for row in rows:
            writer.writerow(row)


def has_key_header(header: Sequence[str]) -> bool:
    """Return True when the first two columns are ``Group`` and ``Filter``."""

    if len(header) < 2:
        return False
    return header[0].strip().lower() == "group" and header[1].strip().lower() == "filter"


__all__ = ["has_key_header", "read_rows", "write_rows"]
