"""
Process-wide cache of image crop-position hints keyed by image URL.

Computing a hint (e.g. face detection) is expensive, so results
are kept for the session in a small least-recently-used map. Two threads
computing the same URL at once is harmless: the hint is a pure function of
the URL and the last write wins.
"""
from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Callable, Dict, Optional

from wikifeed.models import DEFAULT_IMAGE_POSITION

logger = logging.getLogger(__name__)

PositionHintProvider = Callable[[str], str]


def default_position_hint(url: str) -> str:
    return DEFAULT_IMAGE_POSITION


class ImagePositionCache:
    def __init__(
        self,
        provider: Optional[PositionHintProvider] = None,
        max_entries: int = 50,
    ) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.provider = provider or default_position_hint
        self.max_entries = max_entries
        self._lock = threading.Lock()
        self._entries: "OrderedDict[str, str]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def get(self, url: str) -> Optional[str]:
        with self._lock:
            position = self._entries.get(url)
            if position is None:
                return None
            self._entries.move_to_end(url)
            return position

    def set(self, url: str, position: str) -> None:
        with self._lock:
            self._entries[url] = position
            self._entries.move_to_end(url)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted image position for %s", evicted)

    def position_for(self, url: str) -> str:
        """Cached hint for ``url``, computing it with the provider on a miss."""
        cached = self.get(url)
        if cached is not None:
            with self._lock:
                self.hits += 1
            return cached
        # computed outside the lock; duplicate work for one URL is tolerated
        try:
            position = self.provider(url) or DEFAULT_IMAGE_POSITION
        except Exception as exc:
            logger.warning("Position hint failed for %s: %s", url, exc)
            return DEFAULT_IMAGE_POSITION
        with self._lock:
            self.misses += 1
        self.set(url, position)
        return position

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._entries

    def snapshot(self) -> Dict[str, object]:
        """Lightweight view for status payloads."""
        with self._lock:
            return {
                "entries": len(self._entries),
                "max_entries": self.max_entries,
                "hits": self.hits,
                "misses": self.misses,
            }
