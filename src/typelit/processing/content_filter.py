"""Predicate for candidate paragraphs that are not readable book content."""

from __future__ import annotations

import re

from typelit.constants import MIN_ALPHA_RATIO, SHORT_PARAGRAPH_WORDS

# Bracketed illustration directives, e.g. "[Illustration: The Mill]"
_ILLUSTRATION = re.compile(
    r"\[(?:ILLUSTRATION|IMAGE|FIGURE|PLATE|PICTURE|PORTRAIT|MAP|DIAGRAM)",
    re.IGNORECASE,
)

# Structural headings, matched against the upper-cased text of short paragraphs.
HEADING_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p)
    for p in (
        r"^ILLUSTRATION",
        r"^INTRODUCTION$",
        r"^PREFACE$",
        r"^FOREWORD$",
        r"^CONTENTS$",
        r"^TABLE OF CONTENTS$",
        r"^INDEX$",
        r"^APPENDIX$",
        r"^GLOSSARY$",
        r"^BIBLIOGRAPHY$",
        r"^FOOTNOTE",
        r"^NOTE:",
        r"^EDITOR'S NOTE",
        r"^TRANSLATOR'S NOTE",
        r"^\[.*\]$",
        r"^_+$",
        r"^\*+$",
        r"^-+$",
    )
)


def _is_heading(text: str) -> bool:
    upper = text.strip().upper()
    return any(p.search(upper) for p in HEADING_PATTERNS)


def alpha_ratio(text: str) -> float:
    """Fraction of characters in *text* that are ASCII letters."""
    if not text:
        return 1.0
    letters = sum(1 for c in text if ("a" <= c <= "z") or ("A" <= c <= "Z"))
    return letters / len(text)


def should_exclude(text: str) -> bool:
    """Return True if a candidate paragraph is not book content.

    Drops illustration directives, short structural headings (preface,
    contents, index, separators...) and paragraphs that are mostly digits
    or punctuation, such as tables and indices.
    """
    if _ILLUSTRATION.search(text):
        return True

    if len(text.split()) <= SHORT_PARAGRAPH_WORDS and _is_heading(text):
        return True

    return alpha_ratio(text) < MIN_ALPHA_RATIO
