"""Per-book metadata summary over the final paragraph records."""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Sequence

from typelit.constants import DURATION_SECONDS
from typelit.models import BookMetadata, Difficulty, ProcessedParagraph, RawBook
from typelit.processing.assembler import format_authors

# Ties for the most common difficulty go to the earliest entry.
DIFFICULTY_TIE_ORDER: tuple[Difficulty, ...] = (
    Difficulty.EASY,
    Difficulty.MEDIUM,
    Difficulty.HARD,
)
DESCRIPTION_SUBJECTS = 3


class EmptyBookError(ValueError):
    """Raised when a book summary is requested for zero paragraphs.

    This is a caller bug: books without paragraphs must be skipped before
    summarizing.
    """


def generate_slug(title: str) -> str:
    """URL-safe slug for a book title, e.g. ``"Pride & Prejudice"`` -> ``"pride-and-prejudice"``."""
    slug = title.lower()
    slug = re.sub(r"['‘’]", "", slug)
    slug = slug.replace("&", "and")
    slug = re.sub(r"[:;,]", "", slug)
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def dominant_difficulty(paragraphs: Sequence[ProcessedParagraph]) -> Difficulty:
    """Most common difficulty; ties resolved by ``DIFFICULTY_TIE_ORDER``."""
    counts = Counter(p.difficulty for p in paragraphs)
    return max(
        DIFFICULTY_TIE_ORDER,
        key=lambda d: (counts[d], -DIFFICULTY_TIE_ORDER.index(d)),
    )


def duration_histogram(paragraphs: Sequence[ProcessedParagraph]) -> dict[int, int]:
    """Paragraph count per duration bucket; every bucket is present."""
    histogram = dict.fromkeys(DURATION_SECONDS, 0)
    for p in paragraphs:
        if p.duration_bucket_seconds in histogram:
            histogram[p.duration_bucket_seconds] += 1
    return histogram


def summarize_book(book: RawBook, paragraphs: Sequence[ProcessedParagraph]) -> BookMetadata:
    """Aggregate a book's paragraphs into its metadata record.

    Raises:
        EmptyBookError: If *paragraphs* is empty.
    """
    if not paragraphs:
        raise EmptyBookError(
            f"Cannot summarize book {book.id} ({book.title!r}): no paragraphs"
        )

    return BookMetadata(
        book_id=book.id,
        slug=generate_slug(book.title),
        title=book.title,
        author=format_authors(book.authors),
        topic=paragraphs[0].topic,
        dominant_difficulty=dominant_difficulty(paragraphs),
        total_paragraphs=len(paragraphs),
        total_chapters=len({p.chapter for p in paragraphs}),
        duration_histogram=duration_histogram(paragraphs),
        language=paragraphs[0].language,
        cover_image_url=book.cover_image_url,
        description=", ".join(book.subjects[:DESCRIPTION_SUBJECTS]) or None,
    )
