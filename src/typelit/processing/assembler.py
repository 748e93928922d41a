"""Assembly of final paragraph records from chapter-assigned paragraphs."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from typelit.constants import DURATION_BUCKETS, LONGEST_DURATION_SECONDS, UNKNOWN_AUTHOR
from typelit.models import AssignedParagraph, ProcessedParagraph, RawBook
from typelit.processing.readability import score_difficulty


def duration_bucket(word_count: int) -> int:
    """Practice-session length in seconds for a paragraph of *word_count* words."""
    for max_words, seconds in DURATION_BUCKETS:
        if word_count <= max_words:
            return seconds
    return LONGEST_DURATION_SECONDS


def format_authors(authors: Sequence[str]) -> str:
    return ", ".join(a for a in authors if a) or UNKNOWN_AUTHOR


def format_source(title: str, authors: Sequence[str]) -> str:
    """Attribution line, e.g. ``"Emma by Austen, Jane"``."""
    return f"{title} by {format_authors(authors)}"


def assemble_paragraphs(
    assigned: Iterable[AssignedParagraph],
    book: RawBook,
    topic: str,
) -> list[ProcessedParagraph]:
    """Build ``ProcessedParagraph`` records for one book.

    ``section_index`` comes from a per-chapter counter local to this call,
    so concurrent books never share counters.

    Args:
        assigned: Chapter-assigned paragraphs in text order.
        book: Catalog record of the book.
        topic: Topic resolved once for the whole book.

    Returns:
        Records with ``paragraph_index`` running 0..n-1 over the book.
    """
    source = format_source(book.title, book.authors)
    section_counters: dict[int, int] = {}
    records: list[ProcessedParagraph] = []

    for paragraph_index, item in enumerate(assigned):
        text = item.candidate.text
        word_count = len(text.split())
        section_index = section_counters.get(item.chapter, 0)
        section_counters[item.chapter] = section_index + 1

        records.append(
            ProcessedParagraph(
                text=text,
                word_count=word_count,
                difficulty=score_difficulty(text),
                topic=topic,
                duration_bucket_seconds=duration_bucket(word_count),
                source_attribution=source,
                book_id=book.id,
                paragraph_index=paragraph_index,
                chapter=item.chapter,
                section_index=section_index,
                chapter_title=item.chapter_title,
            )
        )

    return records
