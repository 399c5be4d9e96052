"""
Order-preserving de-duplication for titles and related-article entries.
"""
from __future__ import annotations

from typing import Callable, Hashable, Iterable, List, Optional, TypeVar

T = TypeVar("T")


def dedupe_by_key(
    items: Iterable[T],
    key_fn: Callable[[T], Hashable],
    exclude: Optional[Iterable[Hashable]] = None,
) -> List[T]:
    """Keep the first item per key, dropping any key listed in ``exclude``."""
    seen = set(exclude or ())
    result: List[T] = []
    for item in items:
        key = key_fn(item)
        if key in seen:
            continue
        seen.add(key)
        result.append(item)
    return result
