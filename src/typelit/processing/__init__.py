"""Text pipeline turning raw book text into typing-practice paragraphs.

Stages, leaves first: sanitizer, readability, chapters, content_filter,
segmenter, assigner, topics, assembler, summarizer. ``pipeline`` wires
them together for one book.
"""

from typelit.processing.pipeline import BookResult, EmptyContentError, process_book, process_book_text
from typelit.processing.summarizer import EmptyBookError

__all__ = [
    "BookResult",
    "EmptyBookError",
    "EmptyContentError",
    "process_book",
    "process_book_text",
]
