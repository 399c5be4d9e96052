"""
HTTP helper with transport-level retries + polite headers for the wiki API.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from urllib3.util.retry import Retry

from wikifeed.errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "wikifeed/1.0 (related-article explorer)"


class HttpClient:
    def __init__(self, timeout: float = 15, max_retries: int = 1, user_agent: Optional[str] = None):
        self.timeout = timeout
        self.session = requests.Session()
        retry = Retry(
            total=max_retries,
            backoff_factor=0.6,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS"],
        )
        adapter = requests.adapters.HTTPAdapter(max_retries=retry)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)
        self.session.headers.update(
            {
                "User-Agent": user_agent or DEFAULT_USER_AGENT,
                "Accept": "application/json",
            }
        )

    def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("HTTP GET exception for %s: %s", url, exc)
            raise TransportError(str(exc)) from exc
        if resp.status_code != 200:
            logger.warning("HTTP GET failed %s %s", resp.status_code, resp.text[:200])
            raise TransportError(f"HTTP {resp.status_code} from {url}")
        try:
            payload = resp.json()
        except ValueError as exc:
            raise TransportError(f"Invalid JSON from {url}") from exc
        if not isinstance(payload, dict):
            raise TransportError(f"Unexpected payload type from {url}")
        return payload

    def close(self) -> None:
        self.session.close()
