"""
Title normalization + word-overlap similarity used to de-duplicate links.
"""
from __future__ import annotations

import re
from typing import Iterable, List

SIMILARITY_THRESHOLD = 0.4

_DIGITS = re.compile(r"\d+")
_LEADING_DETERMINER = re.compile(r"^(The|A|An) ", re.IGNORECASE)
_CONNECTORS = re.compile(r" in | of | at | during ", re.IGNORECASE)
_NON_WORD = re.compile(r"\W+")


def _normalize_once(title: str) -> str:
    text = _DIGITS.sub("", title)
    text = _LEADING_DETERMINER.sub("", text, count=1)
    text = _CONNECTORS.split(text, maxsplit=1)[0]
    return text.strip()


def get_base_topic(title: str) -> str:
    """
    Reduce a title to its comparable base topic.

    "The 1969 Moon landing in Florida" -> "Moon landing". Repeats until stable
    so that normalizing a base topic again is a no-op.
    """
    current = title or ""
    while True:
        normalized = _normalize_once(current)
        if normalized == current:
            return normalized
        current = normalized


def tokenize(title: str) -> List[str]:
    return [token for token in _NON_WORD.split(get_base_topic(title).lower()) if token]


def _shared_count(words: Iterable[str], others: List[str]) -> int:
    return sum(1 for word in words if word in others)


def calculate_similarity(title1: str, title2: str) -> float:
    words1 = tokenize(title1)
    words2 = tokenize(title2)
    longest = max(len(words1), len(words2))
    if longest == 0:
        return 0.0
    # max of both directions keeps the score symmetric when tokens repeat
    common = max(_shared_count(words1, words2), _shared_count(words2, words1))
    return common / longest


def is_too_similar(title: str, selected: Iterable[str], threshold: float = SIMILARITY_THRESHOLD) -> bool:
    return any(calculate_similarity(existing, title) > threshold for existing in selected)
