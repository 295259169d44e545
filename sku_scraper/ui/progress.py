"""Terminal progress helpers with Rich-based rendering."""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console
from rich.errors import LiveError
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)


@dataclass
class ProgressState:
    total: int
    found: int = 0
    empty: int = 0
    failed: int = 0
    current: str | None = None


class ProgressReporter:
    """Render per-filter progress and keep counters for the run summary."""

    def __init__(self, enabled: bool = True, console: Console | None = None) -> None:
        self.enabled = enabled
        self._console = console
        self._progress: Progress | None = None
        self._task_id: TaskID | None = None
        self.state: ProgressState | None = None

    def start(self, total: int) -> None:
        self.state = ProgressState(total=total)
        if not self.enabled:
            return
        if self._console is None:
            self._console = Console()
        if not self._console.is_terminal:
            # Non-interactive output: stay silent rather than spam lines
            self.enabled = False
            return
        self._progress = Progress(
            SpinnerColumn(style="cyan"),
            BarColumn(bar_width=None, complete_style="green", finished_style="green"),
            TaskProgressColumn(show_speed=False),
            TimeElapsedColumn(),
            TextColumn("[green]✓{task.fields[found]:>3}", justify="right"),
            TextColumn("[yellow]∅{task.fields[empty]:>3}", justify="right"),
            TextColumn("[red]✗{task.fields[failed]:>3}", justify="right"),
            TextColumn("[dim]{task.fields[current]}", justify="left"),
            console=self._console,
            transient=True,
            expand=True,
        )
        try:
            self._progress.__enter__()
        except LiveError:
            self.enabled = False
            self._progress = None
            return
        self._task_id = self._progress.add_task(
            "scrape", total=total, found=0, empty=0, failed=0, current="waiting…"
        )

    def advance(
        self,
        found: bool = False,
        empty: bool = False,
        failed: bool = False,
        current: str | None = None,
    ) -> None:
        if not self.state:
            raise RuntimeError("ProgressReporter.start must be called before advance")
        if current:
            self.state.current = current
        if found:
            self.state.found += 1
        if empty:
            self.state.empty += 1
        if failed:
            self.state.failed += 1
        if self._progress is not None and self._task_id is not None:
            label = self.state.current or ""
            if len(label) > 40:
                label = label[:37] + "..."
            self._progress.update(
                self._task_id,
                advance=1,
                found=self.state.found,
                empty=self.state.empty,
                failed=self.state.failed,
                current=label,
            )

    def close(self) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress.__exit__(None, None, None)
            self._progress = None
        self._task_id = None

    def summary(self) -> dict[str, int]:
        if not self.state:
            return {"found": 0, "empty": 0, "failed": 0}
        return {
            "found": self.state.found,
            "empty": self.state.empty,
            "failed": self.state.failed,
        }


__all__ = ["ProgressReporter", "ProgressState"]
