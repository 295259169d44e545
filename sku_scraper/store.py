"""Master record persistence: load, locate the SKU column, back up, save."""

from __future__ import annotations

import csv
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Sequence

import structlog

from .catalog import FilterKey
from .config import RecordSettings
from .engine.reconcile import ApplyResult, ReconciliationEngine
from .errors import BackupError, SchemaError
from .tabular import has_key_header, read_rows, write_rows


@dataclass(slots=True)
class MasterRecord:
    """Header plus ordered data rows of the master CSV."""

    header: list[str]
    rows: list[list[str]] = field(default_factory=list)
    path: Path | None = None


@dataclass(slots=True)
class UpdateResult:
    record_path: Path
    backup_path: Path | None
    column_index: int
    column_name: str
    applied: ApplyResult
    written: bool

    @property
    def rows_changed(self) -> int:
        return self.applied.rows_changed


class RecordStore:
    """Own the on-disk master record and its backup."""

    def __init__(
        self,
        settings: RecordSettings | None = None,
        engine: ReconciliationEngine | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.settings = settings or RecordSettings()
        self.logger = logger or structlog.get_logger("sku_scraper.store")
        self.engine = engine or ReconciliationEngine(logger=self.logger)

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------
    def load(self, path: Path) -> MasterRecord:
        try:
            rows = read_rows(path)
        except (UnicodeDecodeError, csv.Error) as exc:
            raise SchemaError(path, f"Unable to parse CSV: {exc}") from exc
        if not rows:
            raise SchemaError(path, "CSV file is empty")
        header = rows[0]
        if not has_key_header(header):
            raise SchemaError(
                path, "Unexpected header format, expected 'Group' and 'Filter' as first columns"
            )
        # Blank lines carry no filter key
        data_rows = [row for row in rows[1:] if row]
        return MasterRecord(header=header, rows=data_rows, path=path)

    def locate_identifier_column(self, header: Sequence[str], path: Path | None = None) -> int:
        """Return the rightmost column whose name starts with the SKU prefix."""

        prefix = self.settings.sku_column_prefix
        for index in range(len(header) - 1, -1, -1):
            if header[index].strip().startswith(prefix):
                return index
        raise SchemaError(path, f"No existing {prefix} column found")

    def add_identifier_column(self, record: MasterRecord, label: str) -> int:
        """Append a new ``SKUs (<label>)`` column seeded from the latest one."""

        try:
            previous = self.locate_identifier_column(record.header, record.path)
        except SchemaError:
            previous = None
        name = self.settings.column_name(label)
        if any(column.strip() == name for column in record.header):
            raise SchemaError(record.path, f"Column {name!r} already exists")
        index = len(record.header)
        record.header.append(name)
        for row in record.rows:
            seed = row[previous] if previous is not None and len(row) > previous else ""
            if len(row) < index:
                row.extend([""] * (index - len(row)))
            row.append(seed)
        self.logger.info("identifier_column_added", column=name, index=index, seeded_from=previous)
        return index

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------
    def backup_path(self, path: Path) -> Path:
        return path.with_name(path.name + self.settings.backup_suffix)

    def backup(self, path: Path) -> Path:
        target = self.backup_path(path)
        try:
            shutil.copyfile(path, target)
        except OSError as exc:
            raise BackupError(path, f"Failed to back up CSV: {exc}") from exc
        self.logger.info("record_backed_up", path=str(path), backup=str(target))
        return target

    def save(self, path: Path, record: MasterRecord) -> None:
        write_rows(path, [record.header, *record.rows])
        self.logger.info("record_saved", path=str(path), rows=len(record.rows))

    # ------------------------------------------------------------------
    # Full update
    # ------------------------------------------------------------------
    def update(
        self,
        path: Path,
        scrape_result: Mapping[FilterKey, Sequence[str]],
        new_column: str | None = None,
        dry_run: bool = False,
    ) -> UpdateResult:
        """Back up, merge ``scrape_result`` and rewrite the record.

        The record file is never written unless the backup succeeded. With
        ``dry_run`` nothing is backed up or written.
        """

        backup = None
        if not dry_run:
            backup = self.backup(path)
        record = self.load(path)
        if new_column:
            column_index = self.add_identifier_column(record, new_column)
        else:
            column_index = self.locate_identifier_column(record.header, path)
        column_name = record.header[column_index]
        self.logger.info("identifier_column_found", index=column_index, column=column_name)

        applied = self.engine.apply(record, scrape_result, column_index)
        if not dry_run:
            self.save(path, record)
        return UpdateResult(
            record_path=path,
            backup_path=backup,
            column_index=column_index,
            column_name=column_name,
            applied=applied,
            written=not dry_run,
        )


__all__ = ["MasterRecord", "RecordStore", "UpdateResult"]
