"""Greedy segmentation of sanitized text into practice-sized paragraphs.

Raw paragraphs (blank-line separated) are filtered, then merged or split
so that most output lands in the 120-280 word band:

  1. A non-empty buffer absorbs the next candidate while the total stays
     within 280 words.
  2. A candidate already inside the band is emitted as is (after flushing
     the buffer).
  3. A candidate over 500 words is re-split at sentence boundaries using
     the same accumulate-and-flush rule at sentence granularity.
  4. Anything else joins the buffer, which is flushed once it reaches the
     band. The buffer is flushed first if adding the candidate would push
     it past 500 words.

Flushes below 50 words are dropped silently. Every emitted paragraph keeps
the offset of its first fragment in the sanitized text, so later stages
never need to search for it.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass, field

from typelit.constants import MAX_WORDS, MIN_WORDS, TARGET_MAX_WORDS, TARGET_MIN_WORDS
from typelit.models import CandidateParagraph
from typelit.processing.content_filter import should_exclude

logger = logging.getLogger(__name__)

PARAGRAPH_SEPARATOR = "\n\n"

_BLANK_LINES = re.compile(r"\n\n+")
# A sentence with its terminal punctuation and trailing whitespace.
_SENTENCE = re.compile(r".+?(?:[.!?]+\s+|$)", re.DOTALL)


def count_words(text: str) -> int:
    return len(text.split())


def _in_target_band(word_count: int) -> bool:
    return TARGET_MIN_WORDS <= word_count <= TARGET_MAX_WORDS


def split_raw_paragraphs(text: str) -> Iterator[CandidateParagraph]:
    """Yield trimmed, non-empty blank-line separated fragments with offsets."""
    start = 0
    for separator in _BLANK_LINES.finditer(text):
        yield from _trimmed(text[start:separator.start()], start)
        start = separator.end()
    yield from _trimmed(text[start:], start)


def _trimmed(fragment: str, offset: int) -> Iterator[CandidateParagraph]:
    stripped = fragment.strip()
    if stripped:
        leading = len(fragment) - len(fragment.lstrip())
        yield CandidateParagraph(text=stripped, offset=offset + leading)


def split_sentences(paragraph: CandidateParagraph) -> list[CandidateParagraph]:
    """Split a paragraph after runs of ``.``, ``!`` or ``?`` followed by whitespace.

    Each piece keeps its trailing punctuation and whitespace so that
    concatenating the pieces reproduces the paragraph.
    """
    return [
        CandidateParagraph(text=m.group(0), offset=paragraph.offset + m.start())
        for m in _SENTENCE.finditer(paragraph.text)
        if m.group(0).strip()
    ]


@dataclass
class _Buffer:
    """Accumulates fragments; remembers where the first one started."""

    separator: str
    parts: list[str] = field(default_factory=list)
    offset: int = 0
    words: int = 0

    def add(self, fragment: CandidateParagraph, word_count: int) -> None:
        if not self.parts:
            self.offset = fragment.offset
        self.parts.append(fragment.text)
        self.words += word_count

    def __bool__(self) -> bool:
        return bool(self.parts)

    def flush(self, out: list[CandidateParagraph]) -> None:
        """Emit the buffer if it has at least MIN_WORDS words, then reset."""
        if self.parts and self.words >= MIN_WORDS:
            text = self.separator.join(self.parts).strip()
            out.append(CandidateParagraph(text=text, offset=self.offset))
        self.parts = []
        self.words = 0


def _split_oversized(paragraph: CandidateParagraph, out: list[CandidateParagraph]) -> None:
    chunk = _Buffer(separator="")
    for sentence in split_sentences(paragraph):
        sentence_words = count_words(sentence.text)
        if chunk.words + sentence_words > MAX_WORDS:
            chunk.flush(out)
        chunk.add(sentence, sentence_words)
        if _in_target_band(chunk.words):
            chunk.flush(out)
    chunk.flush(out)


def segment_paragraphs(text: str) -> list[CandidateParagraph]:
    """Split sanitized text into practice paragraphs.

    Args:
        text: Sanitized book text.

    Returns:
        Paragraphs in text order, each with at least ``MIN_WORDS`` words.
    """
    candidates = [c for c in split_raw_paragraphs(text) if not should_exclude(c.text)]
    out: list[CandidateParagraph] = []
    buffer = _Buffer(separator=PARAGRAPH_SEPARATOR)

    for candidate in candidates:
        word_count = count_words(candidate.text)

        if buffer and buffer.words + word_count <= TARGET_MAX_WORDS:
            buffer.add(candidate, word_count)
        elif _in_target_band(word_count):
            buffer.flush(out)
            out.append(candidate)
        elif word_count > MAX_WORDS:
            buffer.flush(out)
            _split_oversized(candidate, out)
        else:
            if buffer.words + word_count > MAX_WORDS:
                buffer.flush(out)
            buffer.add(candidate, word_count)
            if _in_target_band(buffer.words):
                buffer.flush(out)

    buffer.flush(out)
    logger.debug(
        "Segmented %d candidates into %d paragraphs", len(candidates), len(out)
    )
    return out
