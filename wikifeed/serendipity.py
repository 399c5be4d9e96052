"""
Related-article construction and top-up with unrelated random articles.
"""
from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence

from wikifeed.dedupe import dedupe_by_key
from wikifeed.models import BUCKET_ORDER, PageImage, RawPage, RelatedArticle, RelationType

MIN_SOURCE_EXTRACT = 50
MIN_SENTENCE_LENGTH = 20

_SENTENCE_END = re.compile(r"[.!?](?:\s|$)")
_TYPE_ORDER = {RelationType.from_bucket(bucket): index for index, bucket in enumerate(BUCKET_ORDER)}


def first_sentence(extract: str) -> str:
    return _SENTENCE_END.split(extract.strip(), maxsplit=1)[0] + "."


def is_usable_sentence(sentence: str) -> bool:
    return sentence != "." and len(sentence) >= MIN_SENTENCE_LENGTH


def to_related_article(
    page: RawPage,
    relation: RelationType,
    image: Optional[PageImage] = None,
) -> Optional[RelatedArticle]:
    """Build a RelatedArticle from an intro extract, or None when there is too little text."""
    if page.missing or not page.extract or len(page.extract) <= MIN_SOURCE_EXTRACT:
        return None
    sentence = first_sentence(page.extract)
    if not is_usable_sentence(sentence):
        return None
    return RelatedArticle(title=page.title, extract=sentence, type=relation, image=image)


def sort_by_relation(articles: Iterable[RelatedArticle]) -> List[RelatedArticle]:
    return sorted(articles, key=lambda article: _TYPE_ORDER.get(article.type, len(_TYPE_ORDER)))


def missing_relation_types(articles: Sequence[RelatedArticle]) -> List[RelationType]:
    present = {article.type for article in articles}
    return [
        RelationType.from_bucket(bucket)
        for bucket in BUCKET_ORDER
        if RelationType.from_bucket(bucket) not in present
    ]


def serendipity_candidates(pages: Iterable[RawPage]) -> List[RelatedArticle]:
    candidates = []
    for page in pages:
        article = to_related_article(page, RelationType.SERENDIPITY)
        if article is not None:
            candidates.append(article)
    return candidates


def fill_with_serendipity(
    articles: Sequence[RelatedArticle],
    pool: Sequence[RelatedArticle],
    limit: int = 9,
) -> List[RelatedArticle]:
    """
    Append serendipity entries after ``articles`` until ``limit`` or the pool runs out.

    When a whole relation type is absent, one pool entry goes in first
    regardless of how many slots remain.
    """
    result = list(articles)
    if len(result) >= limit:
        return result[:limit]
    candidates = dedupe_by_key(
        pool,
        key_fn=lambda article: article.title,
        exclude=[article.title for article in result],
    )
    if candidates and missing_relation_types(result):
        result.append(candidates.pop(0))
    for article in candidates:
        if len(result) >= limit:
            break
        result.append(article)
    return result
