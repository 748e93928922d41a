"""Chapter boundary detection for sanitized book text.

Only lines that start with the literal token ``CHAPTER`` are considered.
The remainder of the line is handed to an ordered list of matchers:

  - Arabic:  CHAPTER 12, CHAPTER 3. The Storm
  - Roman:   CHAPTER XIV, CHAPTER iv: In Which...
  - Ordinal: CHAPTER THE FIRST ... CHAPTER THE TWENTIETH

"Book One", "Letter IV", "Part II" and similar divisions are not
boundaries.

Numbers found in the text are discarded: boundaries are renumbered 1..n in
offset order, since source numbering can repeat, skip, or restart.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from typelit.models import ChapterBoundary

logger = logging.getLogger(__name__)

CHAPTER_TOKEN = "CHAPTER"

# (number, title) or None
ChapterMatch = tuple[int, str | None]
ChapterMatcher = Callable[[str], ChapterMatch | None]

ORDINAL_WORDS: tuple[str, ...] = (
    "FIRST", "SECOND", "THIRD", "FOURTH", "FIFTH",
    "SIXTH", "SEVENTH", "EIGHTH", "NINTH", "TENTH",
    "ELEVENTH", "TWELFTH", "THIRTEENTH", "FOURTEENTH", "FIFTEENTH",
    "SIXTEENTH", "SEVENTEENTH", "EIGHTEENTH", "NINETEENTH", "TWENTIETH",
)
MAX_ROMAN_CHAPTER = 50

_DELIMS = r"\s.:\-" + "\u2014"
_ARABIC_PATTERN = re.compile(rf"^(\d+)[{_DELIMS}]*(.*)$", re.DOTALL)
# Greedy numeral that must be followed by a delimiter or end of line, so
# "II" never matches as "I" and "LIVES" is not a numeral at all.
_ROMAN_PATTERN = re.compile(rf"^([IVXL]+)(?:[{_DELIMS}]+(.*))?$", re.IGNORECASE | re.DOTALL)
_ORDINAL_PATTERN = re.compile(
    rf"^THE\s+({'|'.join(ORDINAL_WORDS)})\b[{_DELIMS}]*(.*)$",
    re.IGNORECASE | re.DOTALL,
)


def _to_roman(number: int) -> str:
    numerals = (
        (50, "L"), (40, "XL"), (10, "X"), (9, "IX"),
        (5, "V"), (4, "IV"), (1, "I"),
    )
    parts = []
    for value, symbol in numerals:
        count, number = divmod(number, value)
        parts.append(symbol * count)
    return "".join(parts)


# Canonical numerals only: "IIII" or "VX" are not chapter numbers.
ROMAN_NUMERALS: dict[str, int] = {
    _to_roman(n): n for n in range(1, MAX_ROMAN_CHAPTER + 1)
}


def _title(fragment: str | None) -> str | None:
    if fragment is None:
        return None
    fragment = fragment.strip()
    return fragment or None


def match_arabic(remainder: str) -> ChapterMatch | None:
    """Match ``12``, ``12. Title`` or ``12 - Title``."""
    m = _ARABIC_PATTERN.match(remainder)
    if not m:
        return None
    return int(m.group(1)), _title(m.group(2))


def match_roman(remainder: str) -> ChapterMatch | None:
    """Match a Roman numeral from I to L, optionally followed by a title."""
    m = _ROMAN_PATTERN.match(remainder)
    if not m:
        return None
    number = ROMAN_NUMERALS.get(m.group(1).upper())
    if number is None:
        return None
    return number, _title(m.group(2))


def match_ordinal(remainder: str) -> ChapterMatch | None:
    """Match ``THE FIRST`` through ``THE TWENTIETH``."""
    m = _ORDINAL_PATTERN.match(remainder)
    if not m:
        return None
    return ORDINAL_WORDS.index(m.group(1).upper()) + 1, _title(m.group(2))


# Tried in order against the text after the CHAPTER token; first hit wins.
CHAPTER_MATCHERS: tuple[ChapterMatcher, ...] = (
    match_arabic,
    match_roman,
    match_ordinal,
)


def parse_chapter_heading(line: str) -> ChapterMatch | None:
    """Parse a single line as a chapter heading.

    Returns:
        ``(number_as_written, title)`` or ``None`` if the line is not a
        chapter opening.
    """
    stripped = line.strip()
    if not stripped.upper().startswith(CHAPTER_TOKEN):
        return None

    remainder = stripped[len(CHAPTER_TOKEN):].strip()
    for matcher in CHAPTER_MATCHERS:
        result = matcher(remainder)
        if result is not None:
            return result
    return None


def detect_chapters(text: str) -> list[ChapterBoundary]:
    """Find chapter openings in sanitized text.

    Args:
        text: Sanitized book text (``\\n`` line endings).

    Returns:
        Boundaries sorted by offset and numbered 1..n. Never empty: text
        with no recognizable heading yields a single boundary at offset 0.
    """
    found: list[tuple[int, str | None]] = []
    offset = 0

    for line in text.split("\n"):
        match = parse_chapter_heading(line)
        if match is not None:
            _number, title = match
            found.append((offset, title))
        offset += len(line) + 1

    if not found:
        logger.debug("No chapter headings found; using a single chapter")
        return [ChapterBoundary(chapter_number=1, start_offset=0)]

    found.sort(key=lambda item: item[0])
    return [
        ChapterBoundary(chapter_number=i, start_offset=start, title=title)
        for i, (start, title) in enumerate(found, start=1)
    ]
