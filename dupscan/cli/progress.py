from __future__ import annotations

from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from ..scanner.models import ScanIssue
from ..scanner.observer import ScanObserver

PASS_LABELS = {
    1: "Searching",
    2: "Finding Original Files",
}


class RichProgressObserver(ScanObserver):
    """Shows both scan passes as rich progress bars on stderr.

    Pass 1 has no known total, so its bar only counts digested files. Pass 2
    counts finished groups against the number of repeated digests.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console(stderr=True)
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        )
        self._task = None

    def __enter__(self) -> "RichProgressObserver":
        self.progress.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.progress.stop()

    def pass_started(self, pass_number: int, roots: Sequence[str], total: int | None = None) -> None:
        self._task = self.progress.add_task(
            f"[bold cyan][{pass_number}/2] {PASS_LABELS[pass_number]}[/bold cyan]",
            total=total,
        )

    def root_started(self, pass_number: int, index: int, total: int, root: str) -> None:
        self.progress.update(
            self._task,
            description=(
                f"[bold cyan][{pass_number}/2] ({index}/{total}) "
                f"{PASS_LABELS[pass_number]} in[/bold cyan] {escape(root)}"
            ),
        )

    def file_digested(self, pass_number: int, path: str) -> None:
        if pass_number == 1:
            self.progress.advance(self._task)

    def group_found(self, size: int) -> None:
        self.progress.advance(self._task)

    def issue_recorded(self, issue: ScanIssue) -> None:
        self.console.print(f"[yellow]⚠ {issue.code}[/yellow] {escape(issue.path)}: {escape(issue.message)}")

    def pass_finished(self, pass_number: int) -> None:
        self.console.print(f"[green]✓[/green] [{pass_number}/2] {PASS_LABELS[pass_number]} Complete")
