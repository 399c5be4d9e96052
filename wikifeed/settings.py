"""
Centralised settings for the article feed (env-first, optional YAML underneath).

Precedence: WIKIFEED_* environment variables, then the YAML file named by
WIKIFEED_CONFIG (default ./wikifeed.yaml), then the defaults below.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from wikifeed.adapters.wiki_api import DEFAULT_ENDPOINT
from wikifeed.config_loader import load_feed_config
from wikifeed.http_client import DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)


@dataclass
class FeedSettings:
    api_endpoint: str = DEFAULT_ENDPOINT
    user_agent: str = DEFAULT_USER_AGENT
    http_timeout: float = 15.0
    http_retries: int = 1
    max_attempts: int = 3
    retry_delay: float = 1.0
    related_limit: int = 9
    link_limit: int = 50
    random_min_size: int = 3000
    serendipity_pool_size: int = 20
    serendipity_min_size: int = 1000
    image_cache_size: int = 50
    enrichment_workers: int = 4


# Settings where 0 is meaningful (0 disables transport-level retries).
_ZERO_ALLOWED = {"http_retries"}


def _coerce(key: str, raw: Any, default: Any, minimum: int = 1) -> Any:
    if raw is None or str(raw).strip() == "":
        return default
    try:
        if isinstance(default, bool):
            return str(raw).strip().lower() in {"1", "true", "yes", "on"}
        if isinstance(default, int):
            value = int(raw)
        elif isinstance(default, float):
            value = float(raw)
            minimum = 0
        else:
            return str(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid value for %s=%s; using default %s", key, raw, default)
        return default
    if value < minimum:
        logger.warning("%s=%s is below %s; using default %s", key, raw, minimum, default)
        return default
    return value


def load_settings(config_path: Optional[str] = None, environ: Optional[Dict[str, str]] = None) -> FeedSettings:
    env = os.environ if environ is None else environ
    file_values = load_feed_config(config_path or env.get("WIKIFEED_CONFIG"))
    defaults = FeedSettings()
    values: Dict[str, Any] = {}
    for name, default in vars(defaults).items():
        minimum = 0 if name in _ZERO_ALLOWED else 1
        value = _coerce(name, file_values.get(name), default, minimum)
        env_key = f"WIKIFEED_{name.upper()}"
        values[name] = _coerce(env_key, env.get(env_key), value, minimum)
    return FeedSettings(**values)
