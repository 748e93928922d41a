"""Public-domain book ingestion and segmentation for typing practice."""

__version__ = "0.1.0"

from typelit.models import (
    BookMetadata,
    CandidateParagraph,
    ChapterBoundary,
    Difficulty,
    IngestConfig,
    ProcessedParagraph,
    RawBook,
)

__all__ = [
    "BookMetadata",
    "CandidateParagraph",
    "ChapterBoundary",
    "Difficulty",
    "IngestConfig",
    "ProcessedParagraph",
    "RawBook",
    "__version__",
]
