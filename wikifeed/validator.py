"""
Gate deciding whether a fetched page is substantive enough to present.
"""
from __future__ import annotations

from typing import List, Optional

from wikifeed.models import RawPage

MIN_EXTRACT_LENGTH = 100
DISAMBIGUATION_MARKERS = ("may refer to:", "disambiguation page")
LIST_PREFIXES = ("List of", "Index of")


def validate_article(page: Optional[RawPage]) -> List[str]:
    """Return every rejection reason; an empty list means the page is usable."""
    if page is None:
        return ["absent"]
    reasons: List[str] = []
    if page.missing:
        reasons.append("missing")
    extract = (page.extract or "").strip()
    if len(extract) < MIN_EXTRACT_LENGTH:
        reasons.append("too short")
    if "(disambiguation)" in page.title:
        reasons.append("disambiguation title")
    lowered = extract.lower()
    if any(marker in lowered for marker in DISAMBIGUATION_MARKERS):
        reasons.append("disambiguation extract")
    if page.title.startswith(LIST_PREFIXES):
        reasons.append("list page")
    return reasons


def is_valid_article(page: Optional[RawPage]) -> bool:
    return not validate_article(page)
