"""
Adapter for the MediaWiki action API (search, page content, page images, random pages).
"""
from __future__ import annotations

import logging
import threading
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError

from wikifeed.errors import TransportError
from wikifeed.http_client import HttpClient
from wikifeed.models import HealthStatus, PageImage, RawPage
from wikifeed.schemas import QueryResponse, WikiPage

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://en.wikipedia.org/w/api.php"


class WikiApiClient:
    """
    Read-only client for the four query shapes the feed needs.

    Every method raises TransportError when the request or the payload is
    unusable; callers decide whether that is fatal.
    """

    name = "wiki-api"

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        http: Optional[HttpClient] = None,
        link_limit: int = 50,
        search_limit: int = 10,
    ) -> None:
        self.endpoint = endpoint
        self.http = http or HttpClient()
        self.link_limit = link_limit
        self.search_limit = search_limit
        self.health = HealthStatus(name=self.name)
        self._health_lock = threading.Lock()

    def search(self, query: str) -> List[str]:
        response = self._query(
            {
                "list": "search",
                "srsearch": query,
                "srlimit": self.search_limit,
            }
        )
        return [hit.title for hit in response.query.search if hit.title]

    def fetch_page(self, title: str) -> Optional[RawPage]:
        response = self._query(
            {
                "prop": "extracts|categories|links",
                "explaintext": 1,
                "exsectionformat": "plain",
                "exlimit": 1,
                "titles": title,
                "pllimit": self.link_limit,
            }
        )
        page = response.first_page()
        if page is None:
            return None
        return _to_raw_page(page, fallback_title=title)

    def fetch_image(self, title: str) -> Optional[PageImage]:
        response = self._query(
            {
                "prop": "pageimages",
                "piprop": "original|name",
                "titles": title,
            }
        )
        page = response.first_page()
        if page is None:
            return None
        return _to_image(page)

    def fetch_summaries(self, titles: Sequence[str], with_images: bool = True) -> List[RawPage]:
        """Intro-only extracts (and optionally original images) for a batch of titles."""
        if not titles:
            return []
        props = "extracts|pageimages" if with_images else "extracts"
        params: Dict[str, Any] = {
            "prop": props,
            "exintro": 1,
            "explaintext": 1,
            "exlimit": "max",
            "titles": "|".join(titles),
        }
        if with_images:
            params["piprop"] = "original|name"
        response = self._query(params)
        return [_to_raw_page(page) for page in response.page_list() if page.title]

    def random_titles(self, limit: int = 1, min_size: int = 0, non_redirects: bool = False) -> List[str]:
        params: Dict[str, Any] = {
            "list": "random",
            "rnnamespace": 0,
            "rnlimit": limit,
        }
        if min_size:
            params["rnminsize"] = min_size
        if non_redirects:
            params["rnfilterredir"] = "nonredirects"
        response = self._query(params)
        return [entry.title for entry in response.query.random if entry.title]

    def _query(self, params: Dict[str, Any]) -> QueryResponse:
        full_params = {"action": "query", "format": "json"}
        full_params.update(params)
        start = time.time()
        try:
            payload = self.http.get_json(self.endpoint, params=full_params)
            response = QueryResponse.model_validate(payload)
        except ValidationError as exc:
            self._record(start, error=f"Malformed payload: {exc.error_count()} errors")
            raise TransportError("Malformed wiki API payload") from exc
        except TransportError as exc:
            logger.debug("Wiki API query %s failed: %s", params.get("prop") or params.get("list"), exc)
            self._record(start, error=str(exc))
            raise
        self._record(start)
        return response

    def _record(self, start: float, error: Optional[str] = None) -> None:
        with self._health_lock:
            self.health.requests += 1
            self.health.latency_ms = (time.time() - start) * 1000
            if error:
                self.health.failures += 1
                self.health.healthy = False
                self.health.last_error = error
            else:
                self.health.healthy = True
                self.health.last_success = datetime.now(timezone.utc)


def _to_image(page: WikiPage) -> Optional[PageImage]:
    source = page.image_source
    if not source:
        return None
    return PageImage(url=source, caption=page.pageimage or "")


def _to_raw_page(page: WikiPage, fallback_title: str = "") -> RawPage:
    return RawPage(
        title=page.title or fallback_title,
        extract=page.extract,
        missing=page.missing or page.invalid,
        categories=[tag.title for tag in page.categories],
        links=[link.title for link in page.links],
        image=_to_image(page),
    )
