"""Typer CLI entrypoint for the SKU scraper."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer
import yaml
from rich import box
from rich.console import Console
from rich.table import Table

from .config import ConfigRepository
from .errors import ScraperError
from .logging_conf import configure_logging, current_log_dir, tail_log
from .orchestrator import Orchestrator, RunSummary

app = typer.Typer(
    help="Scrape catalog filter pages and merge SKUs into the master record.",
    no_args_is_help=True,
    rich_markup_mode=None,
)
config_app = typer.Typer(name="config", help="Inspect or initialise configuration.", no_args_is_help=True)
log_app = typer.Typer(name="log", help="Inspect run logs.", no_args_is_help=True)
app.add_typer(config_app, name="config")
app.add_typer(log_app, name="log")

console = Console()


@dataclass
class AppState:
    repository: ConfigRepository
    orchestrator: Orchestrator


def build_state(verbose: bool) -> AppState:
    repository = ConfigRepository()
    configure_logging(verbose=verbose, log_dir=repository.locator.logs_dir)
    orchestrator = Orchestrator(config_repository=repository)
    return AppState(repository=repository, orchestrator=orchestrator)


def _get_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if state is None:
        state = build_state(verbose=False)
        ctx.obj = state
    return state


def _progress_default_enabled() -> bool:
    return bool(getattr(sys.stdout, "isatty", lambda: False)())


def _render_summary(summary: RunSummary) -> Table:
    title = "Dry run (nothing written)" if summary.dry_run else "Run summary"
    table = Table(title=title, box=box.SIMPLE_HEAD)
    table.add_column("Metric", style="cyan")
    table.add_column("Count", style="green", justify="right")
    table.add_row("Filters scraped", str(summary.filters))
    table.add_row("With SKUs", str(summary.found))
    table.add_row("No SKUs", str(summary.empty))
    table.add_row("Fetch failed", str(summary.failed))
    table.add_row("Rows changed", str(summary.rows_changed))
    return table


def _render_changes(summary: RunSummary) -> Table:
    table = Table(title=f"Rows changed · {summary.column_name}", box=box.SIMPLE_HEAD)
    table.add_column("Group", style="cyan")
    table.add_column("Filter", style="magenta")
    table.add_column("Added SKUs", style="green", overflow="fold")
    for change in summary.changes:
        table.add_row(change.key.group, change.key.filter, ", ".join(change.added))
    return table


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging.", is_flag=True),
) -> None:
    ctx.obj = build_state(verbose)


@app.command("run", help="Scrape every filter and merge new SKUs into the master record.")
def run(
    ctx: typer.Context,
    filters: Optional[Path] = typer.Option(None, "--filters", help="Filter-site CSV (overrides config)."),
    record: Optional[Path] = typer.Option(None, "--record", help="Master record CSV (overrides config)."),
    new_column: Optional[str] = typer.Option(
        None,
        "--new-column",
        help="Append a new 'SKUs (LABEL)' column instead of reusing the latest one.",
        metavar="LABEL",
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Merge in memory only; no backup, no write.", is_flag=True),
    quiet: bool = typer.Option(False, "--quiet", help="Print a one-line result only.", is_flag=True),
) -> None:
    state = _get_state(ctx)
    progress_flag = _progress_default_enabled() and not quiet
    try:
        summary = state.orchestrator.run(
            filters_path=filters,
            record_path=record,
            new_column=new_column,
            dry_run=dry_run,
            progress_enabled=progress_flag,
        )
    except (ScraperError, OSError) as exc:
        console.print(f"Run aborted: {exc}", style="red")
        raise typer.Exit(code=1)

    if quiet:
        console.print(
            f"Processed {summary.filters} filters, {summary.failed} failed. "
            f"{summary.rows_changed} row(s) changed."
        )
        return
    console.print(_render_summary(summary))
    if summary.changes:
        console.print(_render_changes(summary))
    for key, error in summary.failures.items():
        console.print(f"[yellow]Fetch failed for {key}: {error}[/yellow]")
    if summary.backup_path is not None:
        console.print(f"[dim]Backup written to {summary.backup_path}[/dim]")


@app.command("filters", help="List the filters defined in the filter-site CSV.")
def list_filters(
    ctx: typer.Context,
    filters: Optional[Path] = typer.Option(None, "--filters", help="Filter-site CSV (overrides config)."),
) -> None:
    state = _get_state(ctx)
    try:
        links = state.orchestrator.load_catalog(filters)
    except ScraperError as exc:
        console.print(str(exc), style="red")
        raise typer.Exit(code=1)
    table = Table(title=f"Filters · {len(links)}", box=box.SIMPLE_HEAD)
    table.add_column("Group", style="cyan", no_wrap=True)
    table.add_column("Filter", style="magenta")
    table.add_column("URL", style="dim", overflow="fold")
    for key, url in links.items():
        table.add_row(key.group, key.filter, url)
    console.print(table)


@config_app.command("show", help="Print the active configuration as YAML.")
def config_show(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    payload = state.repository.load().model_dump(mode="json")
    console.print(f"[dim]{state.repository.locator.config_path()}[/dim]")
    console.print(yaml.safe_dump(payload, allow_unicode=True, sort_keys=False), markup=False, highlight=False)


@config_app.command("init", help="Write the default configuration file if missing.")
def config_init(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    path = state.repository.locator.config_path()
    existed = path.exists()
    state.repository.load()
    if existed:
        console.print(f"Configuration already present at {path}", style="yellow")
    else:
        console.print(f"Configuration written to {path}", style="green")


@log_app.command("show", help="Show the tail of the run log.")
def log_show(
    tail: int = typer.Option(100, "--tail", help="Number of lines to show."),
    errors: bool = typer.Option(False, "--errors", help="Show the error log instead.", is_flag=True),
) -> None:
    path = current_log_dir() / ("error.log" if errors else "scraper.log")
    lines = tail_log(path, tail)
    if not lines:
        console.print("No log entries yet.", style="dim")
        return
    console.print(f"{path.name} · last {len(lines)} lines", style="cyan")
    console.print("".join(lines), markup=False, highlight=False)


def cli() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    cli()
