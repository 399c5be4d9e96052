"""
Pick one representative category label for an article.
"""
from __future__ import annotations

import re
from typing import Callable, Iterable, List, Sequence, Tuple

FALLBACK_CATEGORY = "General Knowledge"
CATEGORY_PREFIX = "Category:"

SUBJECT_AREAS = (
    "History",
    "Science",
    "Technology",
    "Arts",
    "Music",
    "Literature",
    "Philosophy",
    "Religion",
    "Sports",
    "Politics",
    "Geography",
)
TYPE_SUFFIXES = ("people", "places", "events", "concepts", "books", "films", "albums")
MAINTENANCE_TERMS = (
    "articles",
    "pages",
    "cs1",
    "use",
    "wikipedia",
    "webarchive",
    "with",
    "containing",
    "stub",
    "disambiguation",
)

_SUBJECT_PATTERN = re.compile(r"^(%s)" % "|".join(SUBJECT_AREAS))
_SUFFIX_PATTERN = re.compile(r"(%s)$" % "|".join(TYPE_SUFFIXES), re.IGNORECASE)


def strip_namespace(tag: str) -> str:
    return tag.replace(CATEGORY_PREFIX, "")


def is_subject_area(tag: str) -> bool:
    return bool(_SUBJECT_PATTERN.match(tag))


def has_type_suffix(tag: str) -> bool:
    return bool(_SUFFIX_PATTERN.search(tag))


def is_content_category(tag: str) -> bool:
    lowered = tag.lower()
    return not any(term in lowered for term in MAINTENANCE_TERMS)


CATEGORY_PRIORITIES: Tuple[Callable[[str], bool], ...] = (
    is_subject_area,
    has_type_suffix,
    is_content_category,
)


def classify_category(tags: Sequence[str], fallback: str = FALLBACK_CATEGORY) -> str:
    """
    Return the first tag matching the highest-priority rule.

    Each rule is tried against every tag before the next rule is considered,
    so a subject-area tag late in the list beats an earlier plain tag.
    """
    for rule in CATEGORY_PRIORITIES:
        for tag in tags:
            if rule(tag):
                return tag
    return fallback


_ICON_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("sword", ("history", "war", "battle")),
    ("atom", ("science", "physics", "chemistry")),
    ("paint-brush", ("art", "paint")),
    ("music-note", ("music", "song", "album")),
    ("film-slate", ("film", "movie", "cinema")),
    ("game-controller", ("game", "play")),
    ("heart", ("health", "medical")),
    ("brain", ("philosophy", "psychology")),
    ("calculator", ("math", "calculation")),
    ("rocket", ("space", "astronomy")),
    ("leaf", ("nature", "environment")),
    ("buildings", ("city", "architecture")),
    ("person", ("person", "biography")),
]


def category_icon(label: str) -> str:
    """Icon key the presentation layer shows next to a category label."""
    lowered = label.lower()
    for icon, keywords in _ICON_KEYWORDS:
        if _contains_any(lowered, keywords):
            return icon
    return "globe"


def _contains_any(text: str, needles: Iterable[str]) -> bool:
    return any(needle in text for needle in needles)
