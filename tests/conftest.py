"""Shared pytest fixtures for the book ingestion tests.

Provides a temporary database, paragraph builders, a small Gutenberg-style
book and its catalog record for all test modules.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from typelit.database import Database
from typelit.models import RawBook

# Ten words each; scored "easy" by the reading-ease formula.
RIVER_SENTENCE = "The small dog ran down the lane to the farm."
RAIN_SENTENCE = "She walked back to the house in the rain."
PRESS_SENTENCE = "This edition of the book was made by the press."


def build_paragraph(sentences: int, sentence: str = RIVER_SENTENCE) -> str:
    """A paragraph of *sentences* copies of a ten-word sentence."""
    return " ".join([sentence] * sentences)


SAMPLE_BOOK = f"""The Project Gutenberg eBook of The Mill
This eBook is for the use of anyone anywhere.

*** START OF THE PROJECT GUTENBERG EBOOK THE MILL ***

THE MILL

CONTENTS

{build_paragraph(20, PRESS_SENTENCE)}

CHAPTER I. The River

{build_paragraph(20)}

{build_paragraph(20)}

[Illustration: The mill at dawn]

CHAPTER II

{build_paragraph(20, RAIN_SENTENCE)}

*** END OF THE PROJECT GUTENBERG EBOOK THE MILL ***
Updated editions will replace the previous one.
"""


@pytest.fixture
def tmp_db(tmp_path: Path) -> Database:
    """Create a temporary SQLite database (file-based for WAL support)."""
    db_path = tmp_path / "test.db"
    db = Database(db_path)
    yield db
    db.close()


@pytest.fixture
def make_paragraph() -> Callable[..., str]:
    """Factory building paragraphs of ten-word sentences."""
    return build_paragraph


@pytest.fixture
def sample_book_text() -> str:
    """A two-chapter book wrapped in license banners.

    After segmentation the front matter (title, contents, an edition note)
    forms one paragraph before CHAPTER I and is dropped; chapter 1 keeps two
    200-word paragraphs and chapter 2 one 202-word paragraph that starts
    with its heading line.
    """
    return SAMPLE_BOOK


@pytest.fixture
def raw_book() -> RawBook:
    """Catalog record matching ``sample_book_text``."""
    return RawBook(
        id=1001,
        title="The Mill",
        authors=["Eliot, George"],
        subjects=["Domestic fiction", "Brothers and sisters -- Fiction", "England -- Fiction"],
        bookshelves=["Best Books Ever Listings"],
        formats={
            "text/plain; charset=us-ascii": "https://example.org/1001.txt",
            "image/jpeg": "https://example.org/1001.jpg",
        },
    )


@pytest.fixture
def sample_text_file(tmp_path: Path) -> Path:
    """``sample_book_text`` written to disk."""
    path = tmp_path / "the_mill.txt"
    path.write_text(SAMPLE_BOOK, encoding="utf-8")
    return path
