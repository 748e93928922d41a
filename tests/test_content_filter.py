"""Tests for the non-content paragraph predicate."""

from __future__ import annotations

import pytest

from typelit.processing.content_filter import alpha_ratio, should_exclude


@pytest.mark.parametrize(
    "text",
    [
        "[Illustration: The mill at dawn]",
        "[ILLUSTRATION]",
        "Some words before [Plate 4] and after",
        "PREFACE",
        "Contents",
        "TABLE OF CONTENTS",
        "Index",
        "Footnote 12",
        "Editor's Note",
        "***",
        "-----",
        "[Transcriber: spelling normalized]",
    ],
)
def test_non_content_excluded(text: str) -> None:
    assert should_exclude(text)


def test_mostly_digits_excluded() -> None:
    assert should_exclude("1234567890 12.5 33 44 55 66 77 a")


def test_prose_kept() -> None:
    assert not should_exclude("It was the best of times, it was the worst of times.")


def test_heading_words_in_prose_kept() -> None:
    assert not should_exclude("INTRODUCTION to the study")
    long_preface = "Preface " + "words of the author on the craft " * 3
    assert not should_exclude(long_preface)


def test_alpha_ratio() -> None:
    assert alpha_ratio("") == 1.0
    assert alpha_ratio("abcd") == 1.0
    assert alpha_ratio("ab12") == 0.5
    assert alpha_ratio("1234") == 0.0


def test_heading_check_limited_to_short_paragraphs() -> None:
    assert should_exclude("FOOTNOTE one two three four")
    assert not should_exclude("FOOTNOTE one two three four five")
