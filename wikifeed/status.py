"""
Status/health payload for the article feed, suitable for dashboards or the CLI.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from wikifeed.feed import ArticleFeed
from wikifeed.models import HealthStatus


def _health_to_dict(status: HealthStatus) -> Dict[str, Any]:
    return {
        "name": status.name,
        "healthy": status.healthy,
        "last_error": status.last_error,
        "last_success": status.last_success.isoformat() if status.last_success else None,
        "requests": status.requests,
        "failures": status.failures,
        "latency_ms": status.latency_ms,
    }


def build_status(feed: ArticleFeed) -> Dict[str, Any]:
    settings = feed.settings
    return {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "upstream": _health_to_dict(feed.client.health),
        "feed": {
            "loading": feed.loading,
            "current_title": feed.current.title if feed.current else None,
            "last_error": feed.last_error,
        },
        "image_cache": feed.image_cache.snapshot(),
        "config": {
            "api_endpoint": settings.api_endpoint,
            "max_attempts": settings.max_attempts,
            "retry_delay": settings.retry_delay,
            "related_limit": settings.related_limit,
        },
    }
