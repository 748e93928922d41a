"""Project-wide named constants.

Constants defined here replace inline magic numbers across the pipeline.
Word-count thresholds are shared by the segmenter and the assembler, so
they live in one place.
"""

# Paragraph word-count band. Most emitted paragraphs land in
# [TARGET_MIN_WORDS, TARGET_MAX_WORDS]; anything below MIN_WORDS is dropped,
# and candidates above MAX_WORDS are re-split at sentence boundaries.
MIN_WORDS: int = 50
TARGET_MIN_WORDS: int = 120
TARGET_MAX_WORDS: int = 280
MAX_WORDS: int = 500

# Content filter: headings are only considered for very short paragraphs.
SHORT_PARAGRAPH_WORDS: int = 5
MIN_ALPHA_RATIO: float = 0.5

# Flesch reading-ease cut-offs (score >= EASY -> easy, >= MEDIUM -> medium).
EASY_READING_EASE: float = 60.0
MEDIUM_READING_EASE: float = 45.0

# Returned by reading_ease() for text without any words.
EMPTY_TEXT_READING_EASE: float = 0.0

# Duration buckets as (max_words, seconds). Anything longer than the last
# bound gets LONGEST_DURATION_SECONDS.
DURATION_BUCKETS: tuple[tuple[int, int], ...] = (
    (150, 30),
    (300, 60),
    (400, 90),
)
LONGEST_DURATION_SECONDS: int = 120
DURATION_SECONDS: tuple[int, ...] = (30, 60, 90, 120)

DEFAULT_LANGUAGE: str = "en"
UNKNOWN_AUTHOR: str = "Unknown"
