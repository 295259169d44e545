"""Run coordinator wiring catalog, fetcher, extractor and record store."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import structlog

from .catalog import FilterCatalog, FilterKey
from .config import ConfigRepository, ScraperConfig
from .engine import Extractor, Fetcher
from .engine.reconcile import RowChange
from .errors import FetchError
from .logging_conf import configure_logging
from .store import RecordStore
from .ui import ProgressReporter

ScrapeResult = dict[FilterKey, list[str]]


@dataclass(slots=True)
class RunSummary:
    """Outcome of one scrape-and-merge run."""

    filters: int = 0
    found: int = 0
    empty: int = 0
    failed: int = 0
    rows_changed: int = 0
    record_path: Path | None = None
    backup_path: Path | None = None
    column_name: str | None = None
    dry_run: bool = False
    failures: dict[FilterKey, str] = field(default_factory=dict)
    changes: list[RowChange] = field(default_factory=list)

    def as_dict(self) -> dict[str, int]:
        return {
            "filters": self.filters,
            "found": self.found,
            "empty": self.empty,
            "failed": self.failed,
            "rows_changed": self.rows_changed,
        }


class Orchestrator:
    """Scrape every catalog filter in order, then merge and persist once."""

    def __init__(
        self,
        config_repository: ConfigRepository,
        fetcher_factory: Callable[[ScraperConfig], Fetcher] | None = None,
        extractor: Extractor | None = None,
        store: RecordStore | None = None,
        catalog: FilterCatalog | None = None,
    ) -> None:
        self.config_repository = config_repository
        self.config: ScraperConfig = config_repository.load()
        self.logger = configure_logging(log_dir=config_repository.locator.logs_dir).bind(
            component="orchestrator"
        )
        self.fetcher_factory = fetcher_factory or (lambda cfg: Fetcher(cfg.fetch))
        self.extractor = extractor or Extractor(self.config.extract)
        self.store = store or RecordStore(self.config.record)
        self.catalog = catalog or FilterCatalog(self.config.page_query_suffix)

    # ------------------------------------------------------------------
    def load_catalog(self, filters_path: Path | None = None) -> dict[FilterKey, str]:
        path = self.config_repository.filters_path(filters_path)
        return self.catalog.load(path)

    def scrape(
        self,
        links: dict[FilterKey, str],
        progress: ProgressReporter | None = None,
        summary: RunSummary | None = None,
    ) -> ScrapeResult:
        """Fetch and extract each filter sequentially, in catalog order.

        A failed fetch degrades to an empty result for that filter.
        """

        summary = summary if summary is not None else RunSummary()
        progress = progress or ProgressReporter(enabled=False)
        progress.start(total=len(links))
        results: ScrapeResult = {}
        fetcher = self.fetcher_factory(self.config)
        try:
            for position, (key, url) in enumerate(links.items(), start=1):
                log = self.logger.bind(filter_group=key.group, filter_name=key.filter)
                log.info("filter_scrape_start", position=position, total=len(links), url=url)
                summary.filters += 1
                try:
                    response = fetcher.fetch(url)
                except FetchError as exc:
                    log.error("filter_fetch_failed", url=url, error=str(exc))
                    summary.failed += 1
                    summary.failures[key] = str(exc)
                    results[key] = []
                    progress.advance(failed=True, current=str(key))
                    continue
                skus = self.extractor.extract(response.text)
                results[key] = skus
                if skus:
                    summary.found += 1
                    log.info("filter_skus_found", count=len(skus))
                    progress.advance(found=True, current=str(key))
                else:
                    summary.empty += 1
                    log.warning("filter_no_skus", url=url)
                    progress.advance(empty=True, current=str(key))
        finally:
            fetcher.close()
            progress.close()
        return results

    def run(
        self,
        filters_path: Path | None = None,
        record_path: Path | None = None,
        new_column: str | None = None,
        dry_run: bool = False,
        progress_enabled: bool | None = None,
    ) -> RunSummary:
        """Scrape all filters and merge the results into the master record.

        ``FormatError`` from the catalog and ``SchemaError``/``BackupError``
        from the store propagate to the caller.
        """

        links = self.load_catalog(filters_path)
        target = self.config_repository.record_path(record_path)
        summary = RunSummary(record_path=target, dry_run=dry_run)
        enabled = self.config.enable_progress_bar if progress_enabled is None else progress_enabled
        results = self.scrape(links, ProgressReporter(enabled=enabled), summary)

        self.logger.info("record_update_start", path=str(target), dry_run=dry_run)
        update = self.store.update(target, results, new_column=new_column, dry_run=dry_run)
        summary.backup_path = update.backup_path
        summary.column_name = update.column_name
        summary.rows_changed = update.rows_changed
        summary.changes = list(update.applied.changes)
        self.logger.info(
            "run_complete",
            filters=summary.filters,
            failed=summary.failed,
            rows_changed=summary.rows_changed,
            dry_run=dry_run,
        )
        return summary


__all__ = ["Orchestrator", "RunSummary", "ScrapeResult"]
