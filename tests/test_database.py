"""Database layer tests.

Validates:
  - WAL mode enabled
  - Idempotent UPSERT of books and paragraphs
  - CHECK constraints on difficulty and duration
  - Re-inserted paragraphs replace the book's stored set
"""

from __future__ import annotations

import sqlite3
from dataclasses import replace

import pytest

from typelit.database import Database
from typelit.models import BookMetadata, Difficulty, ProcessedParagraph


def _make_metadata(book_id: int = 7, topic: str = "fiction") -> BookMetadata:
    """Helper to create a BookMetadata with defaults."""
    return BookMetadata(
        book_id=book_id,
        slug="emma",
        title="Emma",
        author="Austen, Jane",
        topic=topic,
        dominant_difficulty=Difficulty.EASY,
        total_paragraphs=2,
        total_chapters=1,
        duration_histogram={30: 0, 60: 2, 90: 0, 120: 0},
        cover_image_url="https://example.org/7.jpg",
        description="Courtship -- Fiction",
    )


def _make_paragraph(
    index: int = 0,
    book_id: int = 7,
    difficulty: Difficulty = Difficulty.EASY,
    duration: int = 60,
) -> ProcessedParagraph:
    """Helper to create a ProcessedParagraph with defaults."""
    return ProcessedParagraph(
        text=f"Paragraph {index} text.",
        word_count=200,
        difficulty=difficulty,
        topic="fiction",
        duration_bucket_seconds=duration,
        source_attribution="Emma by Austen, Jane",
        book_id=book_id,
        paragraph_index=index,
        chapter=1,
        section_index=index,
        chapter_title="Volume One",
    )


def test_wal_mode_enabled(tmp_db: Database) -> None:
    """WAL journal mode must be enabled."""
    result = tmp_db.conn.execute("PRAGMA journal_mode").fetchone()
    assert result[0] == "wal"


def test_tables_exist(tmp_db: Database) -> None:
    rows = tmp_db.conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
    ).fetchall()
    table_names = {row["name"] for row in rows}

    assert "books" in table_names
    assert "book_paragraphs" in table_names


def test_insert_and_retrieve_book(tmp_db: Database) -> None:
    tmp_db.insert_book(_make_metadata())

    row = tmp_db.get_book(7)
    assert row is not None
    assert row["slug"] == "emma"
    assert row["author"] == "Austen, Jane"
    assert row["difficulty"] == "easy"
    assert row["total_paragraphs"] == 2
    assert row["cover_image_url"] == "https://example.org/7.jpg"
    assert tmp_db.get_duration_map(7) == {30: 0, 60: 2, 90: 0, 120: 0}


def test_missing_book(tmp_db: Database) -> None:
    assert tmp_db.get_book(404) is None
    assert tmp_db.get_duration_map(404) == {}


def test_book_upsert_updates_row(tmp_db: Database) -> None:
    """Re-inserting the same book id updates instead of duplicating."""
    tmp_db.insert_book(_make_metadata())
    tmp_db.insert_book(replace(_make_metadata(), title="Emma (Revised)", total_paragraphs=3))

    assert tmp_db.get_book_count() == 1
    row = tmp_db.get_book(7)
    assert row["title"] == "Emma (Revised)"
    assert row["total_paragraphs"] == 3


def test_insert_paragraphs_in_order(tmp_db: Database) -> None:
    tmp_db.insert_book(_make_metadata())
    tmp_db.insert_paragraphs([_make_paragraph(1), _make_paragraph(0)])

    rows = tmp_db.get_paragraphs(7)
    assert [r["paragraph_index"] for r in rows] == [0, 1]
    assert rows[0]["length_words"] == 200
    assert rows[0]["duration_mode"] == 60
    assert rows[0]["source"] == "Emma by Austen, Jane"
    assert rows[0]["chapter_title"] == "Volume One"


def test_paragraph_upsert_idempotent(tmp_db: Database) -> None:
    tmp_db.insert_book(_make_metadata())
    paragraphs = [_make_paragraph(i) for i in range(3)]
    tmp_db.insert_paragraphs(paragraphs)
    tmp_db.insert_paragraphs(paragraphs)

    assert tmp_db.get_paragraph_count() == 3


def test_reprocessing_removes_stale_paragraphs(tmp_db: Database) -> None:
    """A book re-processed into fewer paragraphs keeps only the new rows."""
    tmp_db.insert_book(_make_metadata())
    tmp_db.insert_paragraphs([_make_paragraph(i) for i in range(5)])
    tmp_db.insert_paragraphs([_make_paragraph(i) for i in range(2)])

    rows = tmp_db.get_paragraphs(7)
    assert [r["paragraph_index"] for r in rows] == [0, 1]
    assert tmp_db.get_paragraph_count() == 2


def test_replacing_one_book_keeps_others(tmp_db: Database) -> None:
    tmp_db.insert_book(_make_metadata(1))
    tmp_db.insert_book(_make_metadata(2))
    tmp_db.insert_paragraphs([_make_paragraph(i, book_id=1) for i in range(3)])
    tmp_db.insert_paragraphs([_make_paragraph(i, book_id=2) for i in range(3)])
    tmp_db.insert_paragraphs([_make_paragraph(0, book_id=1)])

    assert len(tmp_db.get_paragraphs(1)) == 1
    assert len(tmp_db.get_paragraphs(2)) == 3


def test_paragraph_requires_book_row(tmp_db: Database) -> None:
    with pytest.raises(sqlite3.IntegrityError):
        tmp_db.insert_paragraphs([_make_paragraph(book_id=404)])
    assert tmp_db.get_paragraph_count() == 0


def test_empty_paragraph_batch_is_noop(tmp_db: Database) -> None:
    tmp_db.insert_paragraphs([])
    assert tmp_db.get_paragraph_count() == 0


def test_invalid_duration_rejected(tmp_db: Database) -> None:
    tmp_db.insert_book(_make_metadata())
    with pytest.raises(sqlite3.IntegrityError):
        tmp_db.insert_paragraphs([_make_paragraph(duration=45)])


def test_counts_grouped(tmp_db: Database) -> None:
    tmp_db.insert_book(_make_metadata(1, "fiction"))
    tmp_db.insert_book(_make_metadata(2, "fiction"))
    tmp_db.insert_book(_make_metadata(3, "poetry"))
    tmp_db.insert_paragraphs(
        [
            _make_paragraph(0, book_id=1, difficulty=Difficulty.EASY),
            _make_paragraph(1, book_id=1, difficulty=Difficulty.HARD),
            _make_paragraph(2, book_id=1, difficulty=Difficulty.HARD),
        ]
    )

    assert tmp_db.get_topic_counts() == {"fiction": 2, "poetry": 1}
    assert tmp_db.get_difficulty_counts() == {"easy": 1, "hard": 2}


def test_context_manager_closes(tmp_path) -> None:
    with Database(tmp_path / "nested" / "books.db") as db:
        db.insert_book(_make_metadata())
    with pytest.raises(sqlite3.ProgrammingError):
        db.conn.execute("SELECT 1")
