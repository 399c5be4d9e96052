"""
Turn a validated page into an ArticleViewModel: classify, curate related links, enrich.
"""
from __future__ import annotations

import logging
import random
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence, TypeVar

from wikifeed.adapters.wiki_api import WikiApiClient
from wikifeed.cache import ImagePositionCache
from wikifeed.classifier import category_icon, classify_category, strip_namespace
from wikifeed.errors import EnrichmentPartialFailure, TransportError
from wikifeed.grouping import group_links, main_topics
from wikifeed.models import (
    ArticleViewModel,
    GroupedLinks,
    PageImage,
    RawPage,
    RelatedArticle,
    RelationBucket,
    RelationType,
)
from wikifeed.retrieval import LoadToken
from wikifeed.selector import MAX_RELATED, DiversitySelector
from wikifeed.serendipity import (
    fill_with_serendipity,
    serendipity_candidates,
    sort_by_relation,
    to_related_article,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ArticlePipeline:
    """
    Builds the view-model for one page. Sub-fetches that fail are logged and
    replaced by an empty value; they never fail the load.
    """

    def __init__(
        self,
        client: WikiApiClient,
        image_cache: Optional[ImagePositionCache] = None,
        selector: Optional[DiversitySelector] = None,
        rng: Optional[random.Random] = None,
        related_limit: int = MAX_RELATED,
        serendipity_pool_size: int = 20,
        serendipity_min_size: int = 1000,
        max_workers: int = 4,
    ) -> None:
        self.client = client
        self.image_cache = image_cache if image_cache is not None else ImagePositionCache()
        self.selector = selector or DiversitySelector(rng=rng, limit=related_limit)
        self.related_limit = related_limit
        self.serendipity_pool_size = serendipity_pool_size
        self.serendipity_min_size = serendipity_min_size
        self.max_workers = max(2, max_workers)

    def build(self, page: RawPage, token: Optional[LoadToken] = None) -> ArticleViewModel:
        category = classify_category([strip_namespace(tag) for tag in page.categories])
        grouped = group_links(page.title, main_topics(page.categories), page.links)
        selected = self.selector.select(grouped)

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            image_future = executor.submit(self._main_image, page.title)
            related_future = executor.submit(self._related_articles, selected, grouped)
            image = self._join(image_future, "main image", None)
            related = self._join(related_future, "related articles", [])

        if token:
            token.raise_if_cancelled()
        if len(related) < self.related_limit:
            pool = self._join_now(self._serendipity_pool, "serendipity pool", [])
            related = fill_with_serendipity(related, pool, limit=self.related_limit)

        logger.info(
            "Built %r: category=%r related=%d (%s)",
            page.title,
            category,
            len(related),
            ",".join(article.type.value for article in related),
        )
        return ArticleViewModel(
            title=page.title,
            definition=page.extract or "",
            image=image,
            category=category,
            related_articles=related[: self.related_limit],
            category_icon=category_icon(category),
        )

    def _main_image(self, title: str) -> Optional[PageImage]:
        try:
            image = self.client.fetch_image(title)
        except TransportError as exc:
            raise EnrichmentPartialFailure(f"image lookup for {title!r}: {exc}") from exc
        if image is None:
            return None
        return PageImage(url=image.url, caption=image.caption, position=self.image_cache.position_for(image.url))

    def _related_articles(self, titles: Sequence[str], grouped: GroupedLinks) -> List[RelatedArticle]:
        if not titles:
            return []
        try:
            pages = self.client.fetch_summaries(titles, with_images=True)
        except TransportError as exc:
            raise EnrichmentPartialFailure(f"related extracts: {exc}") from exc

        positions = self._positions([page.image.url for page in pages if page.image])
        articles: List[RelatedArticle] = []
        for page in pages:
            image = None
            if page.image:
                image = PageImage(
                    url=page.image.url,
                    caption=page.image.caption,
                    position=positions.get(page.image.url, page.image.position),
                )
            bucket = grouped.bucket_of(page.title) or RelationBucket.BROADER
            article = to_related_article(page, RelationType.from_bucket(bucket), image)
            if article is not None:
                articles.append(article)
        return sort_by_relation(articles)

    def _positions(self, urls: Sequence[str]) -> Dict[str, str]:
        unique = list(dict.fromkeys(urls))
        if not unique:
            return {}
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(unique))) as executor:
            return dict(zip(unique, executor.map(self.image_cache.position_for, unique)))

    def _serendipity_pool(self) -> List[RelatedArticle]:
        try:
            titles = self.client.random_titles(
                limit=self.serendipity_pool_size,
                min_size=self.serendipity_min_size,
            )
            pages = self.client.fetch_summaries(titles, with_images=False)
        except TransportError as exc:
            raise EnrichmentPartialFailure(f"serendipity pool: {exc}") from exc
        return serendipity_candidates(pages)

    @staticmethod
    def _join(future: "Future[T]", label: str, default: T) -> T:
        try:
            return future.result()
        except EnrichmentPartialFailure as exc:
            logger.warning("Skipping %s: %s", label, exc)
            return default

    @staticmethod
    def _join_now(fn, label: str, default):
        try:
            return fn()
        except EnrichmentPartialFailure as exc:
            logger.warning("Skipping %s: %s", label, exc)
            return default
