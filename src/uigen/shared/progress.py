"""Rich progress display for a generation run."""

from __future__ import annotations

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TaskID, TextColumn, TimeElapsedColumn

console = Console()


class GenerationProgress:
    """One spinner line per pipeline step, driven by ``on_progress`` messages.

    Each new message completes the previous step, so the finished steps stay
    on screen as a checklist.
    """

    def __init__(self, console: Console = console) -> None:
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
        )
        self._current: tuple[TaskID, str] | None = None
        self.messages: list[str] = []

    def __enter__(self) -> "GenerationProgress":
        self._progress.__enter__()
        return self

    def __exit__(self, *args: object) -> None:
        self._progress.__exit__(*args)

    def step(self, message: str) -> None:
        """Start a new step, marking the previous one as done."""
        self._complete_current()
        tid = self._progress.add_task(f"[cyan]{message}[/]", total=None)
        self._current = (tid, message)
        self.messages.append(message)

    def finish(self) -> None:
        """Mark the last step as done."""
        self._complete_current()

    def fail(self, error: str) -> None:
        """Mark the running step as failed."""
        if self._current is None:
            return
        tid, message = self._current
        self._progress.update(tid, description=f"[red]✗ {message} {error}[/]", completed=True)
        self._current = None

    def _complete_current(self) -> None:
        if self._current is None:
            return
        tid, message = self._current
        self._progress.update(tid, description=f"[green]✓ {message}[/]", completed=True)
        self._current = None
