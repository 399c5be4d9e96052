"""
Exception taxonomy for article retrieval.

Only ExhaustedRetries is meant to reach callers of the feed; the others are
recovered inside the orchestrator or the enrichment step.
"""
from __future__ import annotations

from typing import List, Optional, Sequence


class WikiFeedError(Exception):
    pass


class TransportError(WikiFeedError):
    """Network failure, non-2xx status or an undecodable response body."""


class ContentInvalid(WikiFeedError):
    def __init__(self, title: str, reasons: Sequence[str]) -> None:
        self.title = title
        self.reasons: List[str] = list(reasons)
        super().__init__(f"{title!r} rejected: {', '.join(self.reasons) or 'invalid'}")


class EnrichmentPartialFailure(WikiFeedError):
    """An optional sub-fetch (image, related extracts, random pool) failed."""


class ExhaustedRetries(WikiFeedError):
    def __init__(self, operation: str, attempts: int, last_error: Optional[BaseException] = None) -> None:
        self.operation = operation
        self.attempts = attempts
        self.last_error = last_error
        detail = f": {last_error}" if last_error else ""
        super().__init__(f"{operation} failed after {attempts} attempts{detail}")


class LoadCancelled(WikiFeedError):
    """A newer load superseded this one."""
