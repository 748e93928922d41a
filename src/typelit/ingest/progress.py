"""Rich progress display for the batch ingestion driver.

One bar over all books, with the current book title and running
paragraph count in the status column.
"""

from __future__ import annotations

from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
)


class IngestProgressTracker:
    """Rich progress tracker for book ingestion.

    Usage::

        tracker = IngestProgressTracker(total_books=75)
        with tracker:
            tracker.book_stored("Emma", paragraphs=412)
            tracker.book_skipped("Some Atlas", "no content after cleaning")
    """

    def __init__(self, total_books: int) -> None:
        self._total_books = total_books
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeRemainingColumn(),
            TextColumn("{task.fields[status]}", style="dim"),
        )
        self._task: TaskID | None = None
        self._stats: dict[str, int] = {
            "stored": 0,
            "skipped": 0,
            "paragraphs": 0,
        }

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the Rich progress display."""
        self._progress.start()
        self._task = self._progress.add_task(
            "[green]Books",
            total=self._total_books,
            status="starting...",
        )

    def stop(self) -> None:
        """Stop the Rich progress display."""
        self._progress.stop()

    def __enter__(self) -> IngestProgressTracker:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        self.stop()

    # ------------------------------------------------------------------
    # Book-level events
    # ------------------------------------------------------------------

    def set_total(self, total_books: int) -> None:
        """Adjust the total once the catalog has been fetched."""
        self._total_books = total_books
        if self._task is not None:
            self._progress.update(self._task, total=total_books)

    def book_stored(self, title: str, paragraphs: int) -> None:
        """Record a book whose paragraphs were stored."""
        self._stats["stored"] += 1
        self._stats["paragraphs"] += paragraphs
        self._advance(f"{_truncate(title)} ({paragraphs} paragraphs)")

    def book_skipped(self, title: str, reason: str) -> None:
        """Record a skipped book."""
        self._stats["skipped"] += 1
        self._advance(f"[yellow]SKIP[/yellow] {_truncate(title)}: {reason}")

    def _advance(self, status: str) -> None:
        if self._task is not None:
            self._progress.advance(self._task, 1)
            self._progress.update(self._task, status=status)

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    @property
    def stats(self) -> dict[str, int]:
        """Return a copy of the current statistics."""
        return dict(self._stats)


def _truncate(title: str, max_len: int = 40) -> str:
    """Truncate a book title for display."""
    if len(title) <= max_len:
        return title
    return title[: max_len - 3] + "..."
