"""SQLite persistence for processed books and paragraphs.

Manages schema initialization, WAL mode pragmas, and the two write
operations the batch driver needs: one book metadata row and a batch of
paragraph rows. The book row is upserted and the paragraph batch replaces
that book's earlier rows, so a failed run can be retried by simply
re-processing the book.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Sequence
from pathlib import Path

from typelit.models import BookMetadata, ProcessedParagraph

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
-- One row per processed book
CREATE TABLE IF NOT EXISTS books (
    id INTEGER PRIMARY KEY,
    slug TEXT NOT NULL,
    title TEXT NOT NULL,
    author TEXT NOT NULL,
    language TEXT NOT NULL DEFAULT 'en',
    topic TEXT NOT NULL,
    difficulty TEXT NOT NULL
        CHECK(difficulty IN ('easy', 'medium', 'hard')),
    total_paragraphs INTEGER NOT NULL,
    total_chapters INTEGER NOT NULL,
    cover_image_url TEXT,
    description TEXT,
    -- JSON object: {"30": n, "60": n, "90": n, "120": n}
    estimated_duration_map TEXT NOT NULL,

    created_at TEXT DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now')),
    updated_at TEXT DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now'))
);

CREATE INDEX IF NOT EXISTS idx_books_slug ON books(slug);
CREATE INDEX IF NOT EXISTS idx_books_topic ON books(topic);

-- Typing-practice paragraphs
CREATE TABLE IF NOT EXISTS book_paragraphs (
    paragraph_id INTEGER PRIMARY KEY AUTOINCREMENT,
    book_id INTEGER NOT NULL REFERENCES books(id) ON DELETE CASCADE,
    paragraph_index INTEGER NOT NULL,
    text TEXT NOT NULL,
    length_words INTEGER NOT NULL,
    difficulty TEXT NOT NULL
        CHECK(difficulty IN ('easy', 'medium', 'hard')),
    topic TEXT NOT NULL,
    duration_mode INTEGER NOT NULL
        CHECK(duration_mode IN (30, 60, 90, 120)),
    source TEXT NOT NULL,
    language TEXT NOT NULL DEFAULT 'en',
    chapter INTEGER NOT NULL,
    section_index INTEGER NOT NULL,
    chapter_title TEXT,

    created_at TEXT DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now')),
    UNIQUE(book_id, paragraph_index)
);

CREATE INDEX IF NOT EXISTS idx_paragraphs_book_chapter
    ON book_paragraphs(book_id, chapter, section_index);
CREATE INDEX IF NOT EXISTS idx_paragraphs_difficulty ON book_paragraphs(difficulty);

-- Auto-update updated_at on any change
CREATE TRIGGER IF NOT EXISTS update_books_timestamp
    AFTER UPDATE ON books
    FOR EACH ROW
    BEGIN
        UPDATE books SET updated_at = strftime('%Y-%m-%dT%H:%M:%f', 'now')
        WHERE id = NEW.id;
    END;
"""

UPSERT_BOOK_SQL = """
INSERT INTO books(id, slug, title, author, language, topic, difficulty,
                  total_paragraphs, total_chapters, cover_image_url,
                  description, estimated_duration_map)
VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
ON CONFLICT(id) DO UPDATE SET
    slug = excluded.slug,
    title = excluded.title,
    author = excluded.author,
    language = excluded.language,
    topic = excluded.topic,
    difficulty = excluded.difficulty,
    total_paragraphs = excluded.total_paragraphs,
    total_chapters = excluded.total_chapters,
    cover_image_url = excluded.cover_image_url,
    description = excluded.description,
    estimated_duration_map = excluded.estimated_duration_map
"""

UPSERT_PARAGRAPH_SQL = """
INSERT INTO book_paragraphs(book_id, paragraph_index, text, length_words,
                            difficulty, topic, duration_mode, source,
                            language, chapter, section_index, chapter_title)
VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
ON CONFLICT(book_id, paragraph_index) DO UPDATE SET
    text = excluded.text,
    length_words = excluded.length_words,
    difficulty = excluded.difficulty,
    topic = excluded.topic,
    duration_mode = excluded.duration_mode,
    source = excluded.source,
    language = excluded.language,
    chapter = excluded.chapter,
    section_index = excluded.section_index,
    chapter_title = excluded.chapter_title
"""


class Database:
    """SQLite database wrapper for processed books.

    Usage:
        with Database("data/books.db") as db:
            db.insert_book(result.metadata)
            db.insert_paragraphs(result.paragraphs)
    """

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = str(db_path)
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self.conn = sqlite3.connect(self.db_path)
        self.conn.row_factory = sqlite3.Row
        self._setup_pragmas()
        self._setup_schema()

    def _setup_pragmas(self) -> None:
        """Configure SQLite pragmas for performance and reliability."""
        self.conn.execute("PRAGMA journal_mode=WAL")
        self.conn.execute("PRAGMA synchronous=NORMAL")
        self.conn.execute("PRAGMA foreign_keys=ON")
        self.conn.execute("PRAGMA temp_store=MEMORY")

        result = self.conn.execute("PRAGMA journal_mode").fetchone()[0]
        if result != "wal":
            logger.warning("WAL mode not enabled, got: %s", result)

    def _setup_schema(self) -> None:
        """Create tables, indexes, and triggers if they don't exist."""
        self.conn.executescript(SCHEMA_SQL)
        self.conn.execute("PRAGMA user_version = 1")

    def insert_book(self, metadata: BookMetadata) -> None:
        """Insert or update one book's metadata row.

        Args:
            metadata: Summary produced by ``summarize_book``.
        """
        histogram = {str(k): v for k, v in metadata.duration_histogram.items()}
        with self.conn:
            self.conn.execute(
                UPSERT_BOOK_SQL,
                (
                    metadata.book_id,
                    metadata.slug,
                    metadata.title,
                    metadata.author,
                    metadata.language,
                    metadata.topic,
                    metadata.dominant_difficulty.value,
                    metadata.total_paragraphs,
                    metadata.total_chapters,
                    metadata.cover_image_url,
                    metadata.description,
                    json.dumps(histogram),
                ),
            )

    def insert_paragraphs(self, paragraphs: Sequence[ProcessedParagraph]) -> None:
        """Replace the stored paragraphs of every book in *paragraphs*.

        Existing rows of those books are deleted in the same transaction, so
        re-processing a book into fewer paragraphs leaves no stale rows. The
        book rows must already exist.

        Args:
            paragraphs: Records for one or more books.
        """
        if not paragraphs:
            return
        book_ids = sorted({p.book_id for p in paragraphs})
        with self.conn:
            self.conn.executemany(
                "DELETE FROM book_paragraphs WHERE book_id = ?",
                [(book_id,) for book_id in book_ids],
            )
            self.conn.executemany(
                UPSERT_PARAGRAPH_SQL,
                [
                    (
                        p.book_id,
                        p.paragraph_index,
                        p.text,
                        p.word_count,
                        p.difficulty.value,
                        p.topic,
                        p.duration_bucket_seconds,
                        p.source_attribution,
                        p.language,
                        p.chapter,
                        p.section_index,
                        p.chapter_title,
                    )
                    for p in paragraphs
                ],
            )
        logger.debug("Stored %d paragraphs", len(paragraphs))

    def get_book(self, book_id: int) -> sqlite3.Row | None:
        return self.conn.execute(
            "SELECT * FROM books WHERE id = ?", (book_id,)
        ).fetchone()

    def get_duration_map(self, book_id: int) -> dict[int, int]:
        """Decode a book's stored duration histogram."""
        row = self.get_book(book_id)
        if row is None:
            return {}
        return {int(k): v for k, v in json.loads(row["estimated_duration_map"]).items()}

    def get_paragraphs(self, book_id: int) -> list[sqlite3.Row]:
        """Return a book's paragraphs in reading order."""
        return self.conn.execute(
            """SELECT * FROM book_paragraphs
               WHERE book_id = ?
               ORDER BY paragraph_index""",
            (book_id,),
        ).fetchall()

    def get_book_count(self) -> int:
        row = self.conn.execute("SELECT COUNT(*) as cnt FROM books").fetchone()
        return row["cnt"]

    def get_paragraph_count(self) -> int:
        row = self.conn.execute("SELECT COUNT(*) as cnt FROM book_paragraphs").fetchone()
        return row["cnt"]

    def get_difficulty_counts(self) -> dict[str, int]:
        """Return paragraph count grouped by difficulty."""
        rows = self.conn.execute(
            "SELECT difficulty, COUNT(*) as cnt FROM book_paragraphs GROUP BY difficulty"
        ).fetchall()
        return {row["difficulty"]: row["cnt"] for row in rows}

    def get_topic_counts(self) -> dict[str, int]:
        """Return book count grouped by topic."""
        rows = self.conn.execute(
            "SELECT topic, COUNT(*) as cnt FROM books GROUP BY topic"
        ).fetchall()
        return {row["topic"]: row["cnt"] for row in rows}

    def close(self) -> None:
        """Close the database connection."""
        self.conn.close()

    def __enter__(self) -> Database:
        return self

    def __exit__(self, exc_type: type | None, exc_val: BaseException | None, exc_tb: object) -> None:
        self.close()
