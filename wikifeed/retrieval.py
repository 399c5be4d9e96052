"""
Fetch-validate-retry loop for loading a presentable article.

Each attempt is Fetching -> Validating -> (Success | Invalid). The decision
after an attempt comes from `decide`, a pure function of the attempt number
and its outcome, so the loop itself only sleeps and counts.
"""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, TypeVar

from wikifeed.adapters.wiki_api import WikiApiClient
from wikifeed.errors import ContentInvalid, ExhaustedRetries, LoadCancelled, TransportError
from wikifeed.models import ArticleViewModel, RawPage
from wikifeed.validator import validate_article

logger = logging.getLogger(__name__)

T = TypeVar("T")

MIN_QUERY_LENGTH = 2


class Outcome(str, Enum):
    SUCCESS = "success"
    TRANSPORT_ERROR = "transport_error"
    CONTENT_INVALID = "content_invalid"
    EXHAUSTED = "exhausted"


class Action(str, Enum):
    SUCCEED = "succeed"
    RETRY = "retry"
    FAIL = "fail"


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    delay: float = 1.0


@dataclass(frozen=True)
class Decision:
    action: Action
    delay: float = 0.0


def decide(attempt: int, outcome: Outcome, policy: RetryPolicy) -> Decision:
    """Map (attempt number, outcome) to succeed / retry-after(delay) / fail."""
    if outcome is Outcome.SUCCESS:
        return Decision(Action.SUCCEED)
    if attempt >= policy.max_attempts:
        return Decision(Action.FAIL)
    return Decision(Action.RETRY, delay=policy.delay)


class LoadToken:
    """Cancellation flag handed to one load; a newer load cancels the older token."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise LoadCancelled("load superseded by a newer request")


ArticleBuilder = Callable[[RawPage, Optional[LoadToken]], ArticleViewModel]

_RECOVERABLE = {
    TransportError: Outcome.TRANSPORT_ERROR,
    ContentInvalid: Outcome.CONTENT_INVALID,
    ExhaustedRetries: Outcome.EXHAUSTED,
}


def _classify(exc: Exception) -> Outcome:
    for exc_type, outcome in _RECOVERABLE.items():
        if isinstance(exc, exc_type):
            return outcome
    raise exc


class RetrievalOrchestrator:
    def __init__(
        self,
        client: WikiApiClient,
        builder: ArticleBuilder,
        policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
        random_min_size: int = 3000,
    ) -> None:
        self.client = client
        self.builder = builder
        self.policy = policy or RetryPolicy()
        self.sleep = sleep
        self.random_min_size = random_min_size

    def fetch_by_title(self, title: str, token: Optional[LoadToken] = None) -> ArticleViewModel:
        return self._run("fetch_by_title", lambda: self._attempt_title(title, token), token)

    def fetch_random(self, token: Optional[LoadToken] = None) -> ArticleViewModel:
        """Draw a fresh random title on every attempt; one title may be unusable."""
        return self._run("fetch_random", lambda: self.fetch_by_title(self._draw_random_title(), token), token)

    def fetch_by_query(self, query: str, token: Optional[LoadToken] = None) -> Optional[ArticleViewModel]:
        """Load the best full-text match for ``query``; None when there is nothing to load."""
        cleaned = (query or "").strip()
        if len(cleaned) < MIN_QUERY_LENGTH:
            return None
        matches = self._run("search", lambda: self.client.search(cleaned), token)
        if not matches:
            logger.info("No search results for %r", cleaned)
            return None
        return self.fetch_by_title(matches[0], token)

    def _attempt_title(self, title: str, token: Optional[LoadToken]) -> ArticleViewModel:
        page = self.client.fetch_page(title)
        reasons = validate_article(page)
        if reasons:
            raise ContentInvalid(title, reasons)
        if token:
            token.raise_if_cancelled()
        return self.builder(page, token)

    def _draw_random_title(self) -> str:
        titles = self.client.random_titles(limit=1, min_size=self.random_min_size, non_redirects=True)
        if not titles:
            raise TransportError("Random page query returned no titles")
        return titles[0]

    def _run(self, operation: str, attempt_fn: Callable[[], T], token: Optional[LoadToken]) -> T:
        attempt = 0
        last_error: Optional[Exception] = None
        while True:
            if token:
                token.raise_if_cancelled()
            attempt += 1
            try:
                result = attempt_fn()
                outcome = Outcome.SUCCESS
            except (TransportError, ContentInvalid, ExhaustedRetries) as exc:
                outcome = _classify(exc)
                last_error = exc
            decision = decide(attempt, outcome, self.policy)
            if decision.action is Action.SUCCEED:
                return result
            if decision.action is Action.FAIL:
                logger.warning("%s gave up after %d attempts: %s", operation, attempt, last_error)
                raise ExhaustedRetries(operation, attempt, last_error)
            logger.debug(
                "%s attempt %d/%d failed (%s); retrying in %.1fs",
                operation,
                attempt,
                self.policy.max_attempts,
                outcome.value,
                decision.delay,
            )
            self.sleep(decision.delay)
