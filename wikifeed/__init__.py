"""
Public API for the related-article feed.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from wikifeed.feed import ArticleFeed
from wikifeed.models import ArticleViewModel
from wikifeed.settings import FeedSettings, load_settings
from wikifeed.status import build_status

SETTINGS: FeedSettings = load_settings()
_feed = ArticleFeed(SETTINGS)


def load_article(title: str) -> Optional[ArticleViewModel]:
    """Load ``title`` with its curated related articles; raises ExhaustedRetries on failure."""
    return _feed.load_title(title)


def load_random_article() -> Optional[ArticleViewModel]:
    return _feed.load_random()


def search_article(query: str) -> Optional[ArticleViewModel]:
    return _feed.load_query(query)


def get_feed_status() -> Dict[str, Any]:
    return build_status(_feed)
