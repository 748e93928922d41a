"""Mapping of segmented paragraphs onto detected chapters.

Paragraphs before the first boundary are front matter (title page,
dedication, contents) and are dropped. Chapters that end up with no
paragraphs at all, e.g. an illustration-only chapter, are squeezed out by
renumbering the surviving chapters 1..N in offset order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from typelit.models import AssignedParagraph, CandidateParagraph, ChapterBoundary

logger = logging.getLogger(__name__)


def locate_paragraphs(text: str, paragraphs: Iterable[str]) -> list[CandidateParagraph]:
    """Recover offsets for plain paragraph strings with a forward-only cursor.

    Each search starts where the previous paragraph ended, so an earlier
    duplicate of the same text is never matched. Paragraphs must be given
    in text order. A paragraph that cannot be found from the cursor is
    placed at the cursor.

    The ingestion pipeline does not call this: it uses the offsets that
    :func:`typelit.processing.segmenter.segment_paragraphs` records while
    cutting the text, which are exact even when identical paragraphs repeat.
    This is a standalone helper for callers holding only plain strings.
    """
    located: list[CandidateParagraph] = []
    cursor = 0
    for paragraph in paragraphs:
        position = text.find(paragraph, cursor)
        if position == -1:
            logger.debug("Paragraph not found after offset %d", cursor)
            located.append(CandidateParagraph(text=paragraph, offset=cursor))
            continue
        located.append(CandidateParagraph(text=paragraph, offset=position))
        cursor = position + len(paragraph)
    return located


def find_boundary(
    offset: int, boundaries: Sequence[ChapterBoundary]
) -> ChapterBoundary | None:
    """Return the last boundary starting at or before *offset*.

    ``None`` means the offset precedes the first boundary.
    """
    for boundary in reversed(boundaries):
        if boundary.start_offset <= offset:
            return boundary
    return None


def assign_chapters(
    paragraphs: Iterable[CandidateParagraph],
    boundaries: Sequence[ChapterBoundary],
) -> list[AssignedParagraph]:
    """Assign paragraphs to chapters and renumber the chapters contiguously.

    Args:
        paragraphs: Segmented paragraphs in text order.
        boundaries: Offset-ascending boundaries from ``detect_chapters``.

    Returns:
        Paragraphs outside the front matter, with chapter numbers
        forming ``1..N`` where N is the number of chapters that kept at
        least one paragraph.
    """
    classified: list[tuple[CandidateParagraph, ChapterBoundary]] = []
    dropped = 0
    for paragraph in paragraphs:
        boundary = find_boundary(paragraph.offset, boundaries)
        if boundary is None:
            dropped += 1
            continue
        classified.append((paragraph, boundary))

    if dropped:
        logger.debug("Dropped %d front-matter paragraphs", dropped)

    used = sorted(
        {b for _, b in classified},
        key=lambda b: b.start_offset,
    )
    remap = {b.chapter_number: i for i, b in enumerate(used, start=1)}

    return [
        AssignedParagraph(
            candidate=paragraph,
            chapter=remap[boundary.chapter_number],
            chapter_title=boundary.title,
        )
        for paragraph, boundary in classified
    ]
