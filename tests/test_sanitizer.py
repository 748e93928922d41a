"""Tests for banner stripping and whitespace normalization."""

from __future__ import annotations

import pytest

from typelit.processing.sanitizer import sanitize_text


def test_strips_header_through_marker_line() -> None:
    raw = "Preamble\nLicense\n*** START OF THE PROJECT GUTENBERG EBOOK EMMA ***\nEmma Woodhouse."
    assert sanitize_text(raw) == "Emma Woodhouse."


def test_strips_footer_from_end_marker() -> None:
    raw = "It was a truth.\n*** END OF THE PROJECT GUTENBERG EBOOK EMMA ***\nLicense text"
    assert sanitize_text(raw) == "It was a truth."


def test_marker_variants_without_space() -> None:
    raw = "junk\n***START OF THIS PROJECT GUTENBERG EBOOK X***\nBody.\n***END OF THIS PROJECT GUTENBERG EBOOK X***"
    assert sanitize_text(raw) == "Body."


def test_marker_split_by_control_character() -> None:
    raw = "Title page\n***\x00START OF THE PROJECT GUTENBERG EBOOK X ***\r\nBody text here."
    assert sanitize_text(raw) == "Body text here."


def test_text_without_markers_is_kept() -> None:
    assert sanitize_text("Just a story.") == "Just a story."


def test_non_printable_characters_removed() -> None:
    raw = "café naïve\x00 \x0cpage\tcolumn"
    assert sanitize_text(raw) == "caf nave page\tcolumn"


def test_line_endings_normalized() -> None:
    assert sanitize_text("one\r\ntwo\rthree") == "one\ntwo\nthree"


def test_excess_blank_lines_collapsed() -> None:
    assert sanitize_text("one\n\n\n\n\ntwo\r\n\r\n\r\nthree") == "one\n\ntwo\n\nthree"


def test_surrounding_whitespace_trimmed() -> None:
    assert sanitize_text("\n\n   Body text.   \n\n") == "Body text."


def test_banner_only_text_is_empty() -> None:
    raw = (
        "*** START OF THE PROJECT GUTENBERG EBOOK NOTHING ***\n"
        "\n\n"
        "*** END OF THE PROJECT GUTENBERG EBOOK NOTHING ***\n"
    )
    assert sanitize_text(raw) == ""


@pytest.mark.parametrize(
    "raw",
    [
        "plain text",
        "a\r\n\r\n\r\n\r\nb\x07c",
        "*** START OF THE PROJECT GUTENBERG EBOOK A ***\nBody\n\n\n\nMore\n*** END OF THE PROJECT GUTENBERG EBOOK A ***",
        "\u2018quoted\u2019 \u2014 dashes \u00bd",
        "Title page\n***\x00START OF THE PROJECT GUTENBERG EBOOK X ***\nBody text here.",
    ],
)
def test_sanitize_is_idempotent(raw: str) -> None:
    once = sanitize_text(raw)
    assert sanitize_text(once) == once


def test_output_is_printable_ascii(sample_book_text: str) -> None:
    text = sanitize_text(sample_book_text.replace("Mill", "Mühle"))
    assert all(c in "\t\n" or 0x20 <= ord(c) <= 0x7E for c in text)
    assert "\r" not in text
    assert "\n\n\n" not in text
