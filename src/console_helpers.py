"""console_helpers.py: Rich terminal output for the card generator CLI.

All Rich usage is kept in this module so the pipeline itself stays free of
terminal concerns. The CLI imports :func:`rprint` for styled messages and
:class:`CardProgressDisplay` to turn progress snapshots into a live bar.

Canonical Usage
---------------
>>> from src.console_helpers import rprint
>>> rprint("[green]Done[/green]")
"""

from __future__ import annotations

from typing import IO, Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from src.pipeline.card_generator.models import GenerationResult, ProgressSnapshot

_RICH_CONSOLE = Console()


def rprint(*objects: Any, file: IO[str] | None = None) -> None:
    r"""Print objects with Rich markup to stdout or ``file``.

    Parameters
    ----------
    *objects : Any
        Objects or Rich renderables to print.
    file : IO[str], optional
        Alternate output stream; defaults to the shared console.
    """
    if file is None:
        _RICH_CONSOLE.print(*objects)
    else:
        Console(file=file).print(*objects)


def print_failure(exc: BaseException) -> None:
    """Print a failed run in red; the exception text is never parsed as markup."""
    rprint(f"[bold red]Card generation failed:[/bold red] {escape(str(exc))}")


class CardProgressDisplay:
    """Live progress bar fed by :class:`ProgressSnapshot` updates.

    Use as a context manager and subscribe :meth:`update` to the processor.
    The bar total is only known once the first snapshot arrives.
    """

    def __init__(self, console: Console | None = None) -> None:
        self._progress = Progress(
            TextColumn("[bold blue]Cards"),
            BarColumn(),
            MofNCompleteColumn(),
            TextColumn("{task.percentage:>3.0f}%"),
            TimeElapsedColumn(),
            console=console or _RICH_CONSOLE,
            transient=False,
        )
        self._task: TaskID | None = None
        self.last_snapshot: ProgressSnapshot | None = None

    def __enter__(self) -> CardProgressDisplay:
        self._progress.start()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._progress.stop()

    def update(self, snapshot: ProgressSnapshot) -> None:
        if self._task is None:
            self._task = self._progress.add_task("cards", total=snapshot.total)
        self._progress.update(
            self._task, completed=snapshot.processed, total=snapshot.total
        )
        self.last_snapshot = snapshot


def result_panel(result: GenerationResult) -> Panel:
    """Build the summary panel printed at the end of a run."""
    lines = [
        f"Status: [bold]{result.status.value}[/bold]",
        f"Cards rendered: {result.processed}/{result.total}",
        f"Rows skipped: {result.skipped}",
    ]
    if result.archive_path is not None:
        lines.append(f"Archive: {result.archive_path}")
    style = "green" if result.succeeded else "yellow"
    return Panel("\n".join(lines), title="Card generation", border_style=style)


__all__ = ["CardProgressDisplay", "print_failure", "result_panel", "rprint"]
