"""Progress callbacks for monitoring and real-time reporting."""

import logging
from typing import Protocol, runtime_checkable

from config.exceptions import GenerationError
from models.book import Book
from models.progress import ProgressEvent

logger = logging.getLogger(__name__)


@runtime_checkable
class ProgressCallback(Protocol):
    """Protocol for generation progress callbacks.

    Implement this protocol to follow a run driven by run_generation().
    """

    def on_progress(self, event: ProgressEvent) -> None:
        """Called for every progress event, in order."""
        ...

    def on_complete(self, book: Book) -> None:
        """Called once with the assembled book."""
        ...

    def on_error(self, error: GenerationError) -> None:
        """Called once when the run fails."""
        ...


class LoggingCallback:
    """Lightweight callback that logs progress to the standard logger."""

    def on_progress(self, event: ProgressEvent) -> None:
        logger.info("[%3.0f%%] %s", event.percent, event.stage)

    def on_complete(self, book: Book) -> None:
        logger.info("Generation complete: '%s' (%d chapters)", book.title, len(book.chapters))

    def on_error(self, error: GenerationError) -> None:
        logger.error("Generation error (%s): %s", error.kind.value, error)


class RichProgressCallback:
    """Progress callback that renders a Rich live progress bar in the terminal."""

    def __init__(self, console=None):
        """
        Args:
            console: Rich Console instance. Creates one if not provided.
        """
        self._console = console
        self._progress = None
        self._task_id = None

    def start(self):
        """Start the progress display. Call before running the generation."""
        from rich.console import Console
        from rich.progress import (
            Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn,
        )

        console = self._console or Console()
        self._progress = Progress(
            SpinnerColumn("dots"),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
        )
        self._progress.start()
        self._task_id = self._progress.add_task("Waiting to start...", total=100)

    def stop(self):
        """Stop the progress display."""
        if self._progress:
            self._progress.stop()
            self._progress = None

    def on_progress(self, event: ProgressEvent) -> None:
        if not self._progress:
            return
        self._progress.update(self._task_id, completed=event.percent, description=event.stage)

    def on_complete(self, book: Book) -> None:
        if not self._progress:
            return
        self._progress.update(
            self._task_id,
            completed=100,
            description=f"[bold green]Done: {book.title} ({len(book.chapters)} chapters)[/]",
        )

    def on_error(self, error: GenerationError) -> None:
        if not self._progress:
            return
        self._progress.update(
            self._task_id,
            description=f"[red]Failed ({error.kind.value}): {str(error)[:80]}[/]",
        )
