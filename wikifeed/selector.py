"""
Choose a small, non-redundant set of related links spanning all relation buckets.
"""
from __future__ import annotations

import logging
import random
from typing import List, Optional

from wikifeed.models import BUCKET_ORDER, GroupedLinks, RelationBucket
from wikifeed.titles import SIMILARITY_THRESHOLD, is_too_similar

logger = logging.getLogger(__name__)

MAX_RELATED = 9


class DiversitySelector:
    """
    Seed one random pick per bucket, then round-robin the buckets until the
    target size is reached or nothing eligible remains.

    The random source is injectable so callers can pin the seed draw.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        limit: int = MAX_RELATED,
        threshold: float = SIMILARITY_THRESHOLD,
    ) -> None:
        self.rng = rng or random.Random()
        self.limit = limit
        self.threshold = threshold

    def select(self, grouped: GroupedLinks) -> List[str]:
        selected: List[str] = []
        self._seed(grouped, selected)
        self._fill(grouped, selected)
        logger.debug(
            "Selected %d of %d/%d/%d direct/related/broader links",
            len(selected),
            len(grouped.direct),
            len(grouped.related),
            len(grouped.broader),
        )
        return selected[: self.limit]

    def _eligible(self, title: str, selected: List[str]) -> bool:
        return title not in selected and not is_too_similar(title, selected, self.threshold)

    def _seed(self, grouped: GroupedLinks, selected: List[str]) -> None:
        for bucket in BUCKET_ORDER:
            if len(selected) >= self.limit:
                return
            pool = [title for title in grouped.bucket(bucket) if self._eligible(title, selected)]
            if pool:
                selected.append(self.rng.choice(pool))

    def _fill(self, grouped: GroupedLinks, selected: List[str]) -> None:
        available: List[RelationBucket] = [b for b in BUCKET_ORDER if grouped.bucket(b)]
        if not available:
            return
        turn = 0
        idle_turns = 0
        while len(selected) < self.limit and idle_turns < len(available):
            bucket = available[turn % len(available)]
            turn += 1
            candidate = next(
                (title for title in grouped.bucket(bucket) if self._eligible(title, selected)),
                None,
            )
            if candidate is None:
                idle_turns += 1
                continue
            selected.append(candidate)
            idle_turns = 0


def select_diverse_links(grouped: GroupedLinks, rng: Optional[random.Random] = None) -> List[str]:
    return DiversitySelector(rng=rng).select(grouped)
