"""
Single-slot article loader used by the presentation layer.

Only the newest load may publish its view-model: starting a load cancels the
token of any load still in flight, and a cancelled load's result is dropped.
"""
from __future__ import annotations

import logging
import random
import threading
import time
from typing import Callable, Optional

from wikifeed.adapters.wiki_api import WikiApiClient
from wikifeed.cache import ImagePositionCache, PositionHintProvider
from wikifeed.errors import ExhaustedRetries, LoadCancelled
from wikifeed.http_client import HttpClient
from wikifeed.models import ArticleViewModel
from wikifeed.pipeline import ArticlePipeline
from wikifeed.retrieval import LoadToken, RetrievalOrchestrator, RetryPolicy
from wikifeed.settings import FeedSettings

logger = logging.getLogger(__name__)


class ArticleFeed:
    def __init__(
        self,
        settings: Optional[FeedSettings] = None,
        client: Optional[WikiApiClient] = None,
        image_cache: Optional[ImagePositionCache] = None,
        position_provider: Optional[PositionHintProvider] = None,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.settings = settings or FeedSettings()
        self.client = client or WikiApiClient(
            endpoint=self.settings.api_endpoint,
            http=HttpClient(
                timeout=self.settings.http_timeout,
                max_retries=self.settings.http_retries,
                user_agent=self.settings.user_agent,
            ),
            link_limit=self.settings.link_limit,
        )
        self.image_cache = image_cache if image_cache is not None else ImagePositionCache(
            provider=position_provider,
            max_entries=self.settings.image_cache_size,
        )
        self.pipeline = ArticlePipeline(
            self.client,
            image_cache=self.image_cache,
            rng=rng,
            related_limit=self.settings.related_limit,
            serendipity_pool_size=self.settings.serendipity_pool_size,
            serendipity_min_size=self.settings.serendipity_min_size,
            max_workers=self.settings.enrichment_workers,
        )
        self.orchestrator = RetrievalOrchestrator(
            self.client,
            builder=self.pipeline.build,
            policy=RetryPolicy(max_attempts=self.settings.max_attempts, delay=self.settings.retry_delay),
            sleep=sleep,
            random_min_size=self.settings.random_min_size,
        )
        self._lock = threading.Lock()
        self._token: Optional[LoadToken] = None
        self.current: Optional[ArticleViewModel] = None
        self.last_error: Optional[str] = None

    def load_title(self, title: str) -> Optional[ArticleViewModel]:
        return self._load(f"title {title!r}", lambda token: self.orchestrator.fetch_by_title(title, token))

    def load_random(self) -> Optional[ArticleViewModel]:
        return self._load("random article", self.orchestrator.fetch_random)

    def load_query(self, query: str) -> Optional[ArticleViewModel]:
        return self._load(f"query {query!r}", lambda token: self.orchestrator.fetch_by_query(query, token))

    @property
    def loading(self) -> bool:
        with self._lock:
            return self._token is not None

    def _begin(self) -> LoadToken:
        token = LoadToken()
        with self._lock:
            if self._token is not None:
                logger.info("Superseding in-flight load")
                self._token.cancel()
            self._token = token
        return token

    def _load(
        self,
        label: str,
        operation: Callable[[LoadToken], Optional[ArticleViewModel]],
    ) -> Optional[ArticleViewModel]:
        """
        Run one load and publish its result if no newer load started meanwhile.

        Returns None when the load was superseded or found nothing to show;
        raises ExhaustedRetries when the current load gave up.
        """
        token = self._begin()
        try:
            result = operation(token)
        except LoadCancelled:
            logger.info("Discarded superseded load of %s", label)
            return None
        except ExhaustedRetries as exc:
            with self._lock:
                if self._token is not token:
                    logger.info("Ignoring failure of superseded load of %s", label)
                    return None
                self.current = None
                self.last_error = str(exc)
            raise
        else:
            with self._lock:
                if self._token is not token or token.cancelled:
                    logger.info("Discarded stale result for %s", label)
                    return None
                if result is not None:
                    self.current = result
                    self.last_error = None
            return result
        finally:
            self._release(token)

    def _release(self, token: LoadToken) -> None:
        with self._lock:
            if self._token is token:
                self._token = None
