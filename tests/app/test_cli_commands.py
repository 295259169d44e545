from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

from typer.testing import CliRunner

from sku_scraper.app import AppState, app
from sku_scraper.catalog import FilterKey
from sku_scraper.engine.reconcile import RowChange
from sku_scraper.errors import SchemaError
from sku_scraper.orchestrator import Orchestrator, RunSummary


class StubOrchestrator:
    def __init__(self, summary: RunSummary | None = None, error: Exception | None = None) -> None:
        self.summary = summary or RunSummary()
        self.error = error
        self.calls: list[dict] = []

    def run(self, **kwargs) -> RunSummary:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.summary

    def load_catalog(self, filters_path=None):
        return {FilterKey("Jackets", "Winter"): "https://shop.example/c?f=winter&page=30"}


def make_state(orchestrator: StubOrchestrator, repository=None) -> AppState:
    return AppState(repository=repository or SimpleNamespace(), orchestrator=orchestrator)


def test_cli_run_prints_summary(monkeypatch) -> None:
    summary = RunSummary(
        filters=2,
        found=1,
        empty=1,
        rows_changed=1,
        column_name="SKUs (Jan '25)",
        backup_path=Path("Filters.csv.bak"),
        changes=[RowChange(0, FilterKey("Jackets", "Winter"), ("1002",), "1001, 1002")],
    )
    state = make_state(StubOrchestrator(summary))
    monkeypatch.setattr("sku_scraper.app.build_state", lambda verbose: state)

    result = CliRunner().invoke(app, ["run", "--record", "custom.csv", "--new-column", "Feb '25"])
    assert result.exit_code == 0, result.stdout
    call = state.orchestrator.calls[0]
    assert call["record_path"] == Path("custom.csv")
    assert call["new_column"] == "Feb '25"
    assert call["dry_run"] is False
    assert "Run summary" in result.stdout
    assert "Rows changed" in result.stdout
    assert "1002" in result.stdout
    assert "Filters.csv.bak" in result.stdout


def test_cli_run_quiet(monkeypatch) -> None:
    state = make_state(StubOrchestrator(RunSummary(filters=3, failed=1, rows_changed=2)))
    monkeypatch.setattr("sku_scraper.app.build_state", lambda verbose: state)
    result = CliRunner().invoke(app, ["run", "--quiet", "--dry-run"])
    assert result.exit_code == 0, result.stdout
    assert state.orchestrator.calls[0]["dry_run"] is True
    assert "Processed 3 filters, 1 failed. 2 row(s) changed." in result.stdout


def test_cli_run_aborts_on_schema_error(monkeypatch) -> None:
    error = SchemaError("Filters.csv", "No existing SKUs column found")
    state = make_state(StubOrchestrator(error=error))
    monkeypatch.setattr("sku_scraper.app.build_state", lambda verbose: state)
    result = CliRunner().invoke(app, ["run"])
    assert result.exit_code == 1
    assert "Run aborted" in result.stdout


def test_cli_lists_filters(monkeypatch) -> None:
    state = make_state(StubOrchestrator())
    monkeypatch.setattr("sku_scraper.app.build_state", lambda verbose: state)
    result = CliRunner().invoke(app, ["filters"])
    assert result.exit_code == 0, result.stdout
    assert "Jackets" in result.stdout
    assert "Winter" in result.stdout


def test_cli_config_show(monkeypatch, temp_config_repository) -> None:
    state = make_state(StubOrchestrator(), repository=temp_config_repository)
    monkeypatch.setattr("sku_scraper.app.build_state", lambda verbose: state)
    result = CliRunner().invoke(app, ["config", "show"])
    assert result.exit_code == 0, result.stdout
    assert "page_query_suffix" in result.stdout


def test_cli_run_reports_undecodable_record(monkeypatch, temp_config_repository, write_csv, tmp_path) -> None:
    write_csv("FilterSites.csv", [["Group", "Filter", "URL"]])
    (tmp_path / "Filters.csv").write_bytes("Group,Filter,SKUs\nJakkar,V\xe9tur,1001\n".encode("latin-1"))
    orchestrator = Orchestrator(temp_config_repository)
    state = make_state(orchestrator, repository=temp_config_repository)
    monkeypatch.setattr("sku_scraper.app.build_state", lambda verbose: state)
    result = CliRunner().invoke(app, ["run", "--quiet"])
    assert result.exit_code == 1
    assert "Run aborted" in result.stdout
