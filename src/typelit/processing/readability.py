"""Heuristic syllable counting and Flesch reading-ease scoring.

The syllable counter is a vowel-group heuristic, not a dictionary lookup.
It misestimates plenty of real words but is stable and deterministic,
which is all the difficulty buckets need.
"""

from __future__ import annotations

import re

from typelit.constants import (
    EASY_READING_EASE,
    EMPTY_TEXT_READING_EASE,
    MEDIUM_READING_EASE,
)
from typelit.models import Difficulty

VOWELS = "aeiouy"

_NON_ALPHA = re.compile(r"[^a-z]")
_SENTENCE_BREAK = re.compile(r"[.!?]+")


def count_syllables(word: str) -> int:
    """Estimate the number of syllables in a single word.

    Args:
        word: A word, possibly with surrounding punctuation.

    Returns:
        Estimated syllable count, always >= 1.
    """
    word = _NON_ALPHA.sub("", word.lower())
    if len(word) <= 2:
        return 1

    syllables = 0
    previous_was_vowel = False
    for char in word:
        is_vowel = char in VOWELS
        if is_vowel and not previous_was_vowel:
            syllables += 1
        previous_was_vowel = is_vowel

    # Silent trailing 'e'
    if word.endswith("e") and syllables > 1:
        syllables -= 1

    # "-ble", "-tle", ... are under-counted by the rule above
    if word.endswith("le") and word[-3] not in VOWELS:
        syllables += 1

    return max(syllables, 1)


def reading_ease(text: str) -> float:
    """Compute the Flesch reading-ease score of a text span.

    ``206.835 - 1.015 * (words / sentences) - 84.6 * (syllables / words)``

    Returns ``EMPTY_TEXT_READING_EASE`` when the text has no words.
    """
    words = text.split()
    if not words:
        return EMPTY_TEXT_READING_EASE

    sentences = [s for s in _SENTENCE_BREAK.split(text) if s.strip()]
    sentence_count = max(len(sentences), 1)
    total_syllables = sum(count_syllables(w) for w in words)

    words_per_sentence = len(words) / sentence_count
    syllables_per_word = total_syllables / len(words)
    return 206.835 - 1.015 * words_per_sentence - 84.6 * syllables_per_word


def difficulty_for_score(score: float) -> Difficulty:
    """Map a reading-ease score to its difficulty tier."""
    if score >= EASY_READING_EASE:
        return Difficulty.EASY
    if score >= MEDIUM_READING_EASE:
        return Difficulty.MEDIUM
    return Difficulty.HARD


def score_difficulty(text: str) -> Difficulty:
    """Difficulty tier of a text span."""
    return difficulty_for_score(reading_ease(text))
