"""Data models and enums for the book ingestion pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum

from typelit.constants import DEFAULT_LANGUAGE

# Plain-text format keys in the order they are preferred.
PLAIN_TEXT_FORMATS: tuple[str, ...] = (
    "text/plain; charset=utf-8",
    "text/plain; charset=us-ascii",
    "text/plain",
)
COVER_IMAGE_FORMAT = "image/jpeg"


class Difficulty(str, Enum):
    """Reading difficulty tier derived from the reading-ease score."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass
class RawBook:
    """Catalog record for one book, as read from the catalog API.

    The pipeline only reads it; ``formats`` maps a content type to a URL.
    """

    id: int
    title: str
    authors: list[str] = field(default_factory=list)
    subjects: list[str] = field(default_factory=list)
    bookshelves: list[str] = field(default_factory=list)
    formats: dict[str, str] = field(default_factory=dict)

    @property
    def plain_text_url(self) -> str | None:
        """URL of the preferred plain-text rendition, or ``None`` if absent."""
        for key in PLAIN_TEXT_FORMATS:
            if self.formats.get(key):
                return self.formats[key]
        for key, url in self.formats.items():
            if key.startswith("text/plain") and url:
                return url
        return None

    @property
    def cover_image_url(self) -> str | None:
        return self.formats.get(COVER_IMAGE_FORMAT) or None


@dataclass(frozen=True, slots=True)
class ChapterBoundary:
    """A chapter opening line found in sanitized text."""

    chapter_number: int
    start_offset: int  # character offset of the heading line
    title: str | None = None


@dataclass(frozen=True, slots=True)
class CandidateParagraph:
    """A segmented paragraph and its character offset in sanitized text."""

    text: str
    offset: int


@dataclass(frozen=True, slots=True)
class AssignedParagraph:
    """A candidate paragraph mapped to its (contiguously renumbered) chapter."""

    candidate: CandidateParagraph
    chapter: int
    chapter_title: str | None = None


@dataclass(frozen=True, slots=True)
class ProcessedParagraph:
    """Final typing-practice paragraph handed to the storage layer."""

    text: str
    word_count: int
    difficulty: Difficulty
    topic: str
    duration_bucket_seconds: int
    source_attribution: str
    book_id: int
    paragraph_index: int
    chapter: int
    section_index: int  # 0-based position within the chapter
    chapter_title: str | None = None
    language: str = DEFAULT_LANGUAGE

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary with enum values as strings."""
        d = asdict(self)
        d["difficulty"] = self.difficulty.value
        return d


@dataclass(frozen=True)
class BookMetadata:
    """Per-book summary derived from all of its processed paragraphs."""

    book_id: int
    slug: str
    title: str
    author: str
    topic: str
    dominant_difficulty: Difficulty
    total_paragraphs: int
    total_chapters: int
    duration_histogram: dict[int, int]
    language: str = DEFAULT_LANGUAGE
    cover_image_url: str | None = None
    description: str | None = None


@dataclass
class IngestConfig:
    """Configuration for the catalog fetch and batch ingestion driver.

    Controls the catalog endpoint, request timeouts, the politeness delay
    between catalog pages, download throttling and per-book concurrency.
    """

    catalog_url: str = "https://gutendex.com/books"
    languages: str = "en"
    request_timeout_seconds: float = 30.0
    page_delay_seconds: float = 0.5
    max_retries: int = 3
    book_limit: int = 75
    max_concurrent_books: int = 4
    downloads_per_minute: int = 60
    db_path: str = "data/books.db"
