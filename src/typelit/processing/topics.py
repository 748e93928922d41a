"""Resolution of free-text catalog subject tags to a closed topic set.

Subjects are checked before bookshelves; within each tag the keyword list
is scanned in order and the first substring hit wins. Unmatched books fall
through to a coarse fiction / science / history classification and finally
to ``general``.
"""

from __future__ import annotations

from collections.abc import Iterable

# Compound keywords come first so they are not shadowed by "fiction". A
# subject such as "Science fiction" therefore resolves to "science-fiction",
# not "fiction"; callers grouping books by topic see the narrower tag.
TOPIC_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("science fiction", "science-fiction"),
    ("historical fiction", "historical-fiction"),
    # Fiction
    ("fiction", "fiction"),
    ("fantasy", "fantasy"),
    ("adventure", "adventure"),
    ("mystery", "mystery"),
    ("detective", "mystery"),
    ("thriller", "thriller"),
    ("horror", "horror"),
    ("romance", "romance"),
    ("western", "western"),
    # Classics and literature
    ("classics", "classics"),
    ("literature", "classics"),
    ("poetry", "poetry"),
    ("drama", "drama"),
    ("plays", "drama"),
    ("shakespeare", "classics"),
    # Non-fiction
    ("history", "history"),
    ("biography", "biography"),
    ("autobiography", "biography"),
    ("philosophy", "philosophy"),
    ("psychology", "psychology"),
    ("science", "science"),
    ("nature", "nature"),
    ("travel", "travel"),
    ("religion", "religion"),
    ("education", "education"),
    ("politics", "politics"),
    ("economics", "economics"),
    ("sociology", "sociology"),
    # Children's and young adult
    ("children", "children"),
    ("juvenile", "children"),
    ("young adult", "young-adult"),
    # Other
    ("humor", "humor"),
    ("satire", "humor"),
    ("short stories", "short-stories"),
    ("essays", "essays"),
    ("reference", "reference"),
)

FALLBACK_TOPICS: tuple[str, ...] = ("fiction", "science", "history")
DEFAULT_TOPIC = "general"


def extract_topic(subjects: Iterable[str], bookshelves: Iterable[str] = ()) -> str:
    """Resolve a book's topic from its catalog tags.

    Args:
        subjects: Subject strings, e.g. ``"Detective and mystery stories"``.
        bookshelves: Bookshelf strings, checked after the subjects.

    Returns:
        A topic tag from ``TOPIC_KEYWORDS``, a fallback topic, or ``general``.
    """
    categories = [c.lower() for c in (*subjects, *bookshelves)]

    for category in categories:
        for keyword, topic in TOPIC_KEYWORDS:
            if keyword in category:
                return topic

    for fallback in FALLBACK_TOPICS:
        if any(fallback in c for c in categories):
            return fallback

    return DEFAULT_TOPIC
