"""
Partition an article's outbound links by how closely they relate to it.
"""
from __future__ import annotations

import re
from typing import Iterable, List, Sequence

from wikifeed.classifier import strip_namespace
from wikifeed.dedupe import dedupe_by_key
from wikifeed.models import GroupedLinks
from wikifeed.titles import get_base_topic

_NON_ARTICLE_NAMESPACE = re.compile(
    r"^(Wikipedia:|Template:|Category:|Portal:|Draft:|File:|Help:|Module:|Special:)",
    re.IGNORECASE,
)
_MAINTENANCE_TAG = re.compile(
    r"articles|pages|cs1|use|wikipedia|webarchive|stub|disambiguation",
    re.IGNORECASE,
)


def main_topics(categories: Iterable[str]) -> List[str]:
    """Category tags that describe the subject rather than page upkeep."""
    topics: List[str] = []
    for raw in categories:
        tag = strip_namespace(raw)
        if _MAINTENANCE_TAG.search(tag):
            continue
        if "with" in tag or "containing" in tag:
            continue
        topics.append(tag)
    return topics


def is_article_link(title: str) -> bool:
    if _NON_ARTICLE_NAMESPACE.match(title):
        return False
    return "disambiguation" not in title and "Redirect" not in title


def group_links(article_title: str, topics: Sequence[str], links: Iterable[str]) -> GroupedLinks:
    """
    Bucket every surviving link as direct, related or broader.

    direct: contains the article's base topic; related: contains one of the
    main topics; broader: everything else. Substring matching means a shared
    common word ("River") can put an unrelated link in direct.
    """
    base_topic = get_base_topic(article_title)
    grouped = GroupedLinks()
    for title in dedupe_by_key(links, key_fn=lambda link: link):
        if not title or not is_article_link(title):
            continue
        if base_topic and base_topic in title:
            grouped.direct.append(title)
        elif any(topic and topic in title for topic in topics):
            grouped.related.append(title)
        else:
            grouped.broader.append(title)
    return grouped
