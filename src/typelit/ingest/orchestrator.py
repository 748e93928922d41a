"""Async batch driver: catalog fetch, per-book pipeline, persistence.

Books are independent. Up to ``max_concurrent_books`` are in flight at
once (asyncio Semaphore); downloads are throttled with aiolimiter; the
CPU-bound pipeline runs in a worker thread so downloads keep flowing.
Database writes stay on the event loop thread.

Failure handling:
  - catalog page failure -> CatalogError propagates, the batch aborts
  - download failure, empty text, zero paragraphs -> book skipped, logged
  - anything else raised by the pipeline propagates
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from aiolimiter import AsyncLimiter

from typelit.catalog.client import DownloadError
from typelit.models import IngestConfig, RawBook
from typelit.processing.pipeline import EmptyContentError, process_book

if TYPE_CHECKING:
    from typelit.catalog.client import CatalogClient
    from typelit.database import Database
    from typelit.ingest.progress import IngestProgressTracker

logger = logging.getLogger(__name__)


@dataclass
class IngestReport:
    """Outcome of one batch run."""

    total: int = 0
    succeeded: int = 0
    paragraphs: int = 0
    skipped_books: list[tuple[int, str]] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.skipped_books)


class IngestOrchestrator:
    """Runs the ingestion pipeline over a batch of catalog books.

    Args:
        client: CatalogClient used for the listing and text downloads.
        db: Database receiving book and paragraph rows.
        config: IngestConfig with concurrency and throttle settings.
        progress: Optional Rich progress tracker.
    """

    def __init__(
        self,
        client: "CatalogClient",
        db: "Database",
        config: IngestConfig | None = None,
        progress: "IngestProgressTracker | None" = None,
    ) -> None:
        self._client = client
        self._db = db
        self._config = config or IngestConfig()
        self._progress = progress
        self._semaphore = asyncio.Semaphore(max(1, self._config.max_concurrent_books))
        self._download_limiter = AsyncLimiter(max(1, self._config.downloads_per_minute), 60)

    async def run(self, limit: int | None = None) -> IngestReport:
        """Fetch the catalog and ingest every book in it.

        Raises:
            CatalogError: If the catalog listing cannot be fetched.
        """
        books = await self._client.fetch_books(limit)
        return await self.ingest_books(books)

    async def ingest_books(self, books: list[RawBook]) -> IngestReport:
        """Ingest an already-fetched list of books."""
        report = IngestReport(total=len(books))
        if self._progress is not None:
            self._progress.set_total(len(books))

        logger.info("Processing %d books", len(books))
        await asyncio.gather(*(self._ingest_one(book, report) for book in books))

        logger.info(
            "Batch complete: %d/%d books stored, %d paragraphs, %d skipped",
            report.succeeded, report.total, report.paragraphs, report.skipped,
        )
        return report

    async def _ingest_one(self, book: RawBook, report: IngestReport) -> None:
        async with self._semaphore:
            url = book.plain_text_url
            if url is None:
                logger.warning("Book %d %r: no plain-text format", book.id, book.title)
                self._skip(book, "no plain-text format", report)
                return

            try:
                async with self._download_limiter:
                    raw_text = await self._client.download_text(url)
                result = await asyncio.to_thread(process_book, raw_text, book)
            except DownloadError as exc:
                logger.warning("Book %d %r: %s", book.id, book.title, exc)
                self._skip(book, "download failed", report)
                return
            except EmptyContentError as exc:
                logger.warning("%s", exc)
                self._skip(book, "no paragraphs", report)
                return

            self._db.insert_book(result.metadata)
            self._db.insert_paragraphs(result.paragraphs)

            report.succeeded += 1
            report.paragraphs += len(result.paragraphs)
            logger.info(
                "Book %d %r: inserted %d paragraphs",
                book.id, book.title, len(result.paragraphs),
            )
            if self._progress is not None:
                self._progress.book_stored(book.title, len(result.paragraphs))

    def _skip(self, book: RawBook, reason: str, report: IngestReport) -> None:
        report.skipped_books.append((book.id, reason))
        if self._progress is not None:
            self._progress.book_skipped(book.title, reason)
