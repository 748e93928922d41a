"""Removal of transmission artifacts from raw book text.

Project Gutenberg texts wrap the actual book between license banners.
The text is reduced to printable ASCII with normalized line endings, then
everything up to and including the start-marker line and everything from
the end marker on is cut.
"""

from __future__ import annotations

import re

# Tried in order; the first marker found wins.
START_MARKERS: tuple[str, ...] = (
    "*** START OF THIS PROJECT GUTENBERG",
    "*** START OF THE PROJECT GUTENBERG",
    "***START OF THIS PROJECT GUTENBERG",
    "***START OF THE PROJECT GUTENBERG",
)
END_MARKERS: tuple[str, ...] = (
    "*** END OF THIS PROJECT GUTENBERG",
    "*** END OF THE PROJECT GUTENBERG",
    "***END OF THIS PROJECT GUTENBERG",
    "***END OF THE PROJECT GUTENBERG",
)

# Everything except tab, LF, CR and printable ASCII.
_NON_PRINTABLE = re.compile(r"[^\t\n\r\x20-\x7e]")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")


def _strip_header(text: str) -> str:
    for marker in START_MARKERS:
        index = text.find(marker)
        if index != -1:
            line_end = text.find("\n", index)
            if line_end != -1:
                return text[line_end + 1:]
            return text
    return text


def _strip_footer(text: str) -> str:
    for marker in END_MARKERS:
        index = text.find(marker)
        if index != -1:
            return text[:index]
    return text


def sanitize_text(raw_text: str) -> str:
    """Strip banners and control characters and normalize whitespace.

    Args:
        raw_text: Book text as downloaded.

    Returns:
        Sanitized text. An empty string means the book has no usable
        content; callers must treat it as such and skip the book.
    """
    # Strip first: a control character inside a marker would hide it.
    text = _NON_PRINTABLE.sub("", raw_text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _strip_header(text)
    text = _strip_footer(text)
    text = _EXCESS_NEWLINES.sub("\n\n", text)
    return text.strip()
