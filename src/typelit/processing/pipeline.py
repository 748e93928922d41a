"""Per-book pipeline: raw text in, paragraph records and metadata out.

Data flow::

    raw text -> sanitize_text -> detect_chapters --+
                              -> segment_paragraphs +-> assign_chapters
                                                        -> assemble_paragraphs
                                                        -> summarize_book

Everything here is synchronous and touches no shared state, so separate
books can run in parallel workers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from typelit.models import BookMetadata, ProcessedParagraph, RawBook
from typelit.processing.assembler import assemble_paragraphs
from typelit.processing.assigner import assign_chapters
from typelit.processing.chapters import detect_chapters
from typelit.processing.sanitizer import sanitize_text
from typelit.processing.segmenter import segment_paragraphs
from typelit.processing.summarizer import summarize_book
from typelit.processing.topics import extract_topic

logger = logging.getLogger(__name__)


class EmptyContentError(Exception):
    """Raised when a book yields no usable text or no paragraphs."""


@dataclass
class BookResult:
    """Output of the pipeline for one book."""

    metadata: BookMetadata
    paragraphs: list[ProcessedParagraph]


def process_book_text(raw_text: str, book: RawBook) -> list[ProcessedParagraph]:
    """Turn a book's raw text into practice paragraphs.

    Args:
        raw_text: Downloaded plain-text body.
        book: Catalog record supplying id, title, authors and tags.

    Returns:
        Non-empty list of paragraph records in text order.

    Raises:
        EmptyContentError: If sanitizing leaves nothing, or no paragraph
            survives filtering and front-matter exclusion.
    """
    text = sanitize_text(raw_text)
    if not text:
        raise EmptyContentError(f"Book {book.id} ({book.title!r}) has no content after cleaning")

    boundaries = detect_chapters(text)
    logger.info("Book %d %r: detected %d chapter(s)", book.id, book.title, len(boundaries))

    candidates = segment_paragraphs(text)
    logger.info("Book %d %r: extracted %d raw paragraphs", book.id, book.title, len(candidates))

    assigned = assign_chapters(candidates, boundaries)
    if not assigned:
        raise EmptyContentError(f"Book {book.id} ({book.title!r}) has no paragraphs after filtering")

    topic = extract_topic(book.subjects, book.bookshelves)
    paragraphs = assemble_paragraphs(assigned, book, topic)

    chapters = len({p.chapter for p in paragraphs})
    logger.info(
        "Book %d %r: kept %d paragraphs in %d chapter(s)",
        book.id, book.title, len(paragraphs), chapters,
    )
    return paragraphs


def process_book(raw_text: str, book: RawBook) -> BookResult:
    """Run the full pipeline, including the metadata summary."""
    paragraphs = process_book_text(raw_text, book)
    return BookResult(metadata=summarize_book(book, paragraphs), paragraphs=paragraphs)
