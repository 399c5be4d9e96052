"""
Core data structures shared by the article feed and the curation engine.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

DEFAULT_IMAGE_POSITION = "center 25%"


class RelationBucket(str, Enum):
    DIRECT = "direct"
    RELATED = "related"
    BROADER = "broader"


class RelationType(str, Enum):
    DIRECT = "direct"
    RELATED = "related"
    BROADER = "broader"
    SERENDIPITY = "serendipity"

    @classmethod
    def from_bucket(cls, bucket: RelationBucket) -> "RelationType":
        return cls(bucket.value)


BUCKET_ORDER = (RelationBucket.DIRECT, RelationBucket.RELATED, RelationBucket.BROADER)


@dataclass(frozen=True)
class PageImage:
    url: str
    caption: str = ""
    position: str = DEFAULT_IMAGE_POSITION


@dataclass
class RawPage:
    """
    Upstream payload for one title, already unwrapped from the API envelope.
    """

    title: str
    extract: Optional[str] = None
    missing: bool = False
    categories: List[str] = field(default_factory=list)
    links: List[str] = field(default_factory=list)
    image: Optional[PageImage] = None


@dataclass
class GroupedLinks:
    direct: List[str] = field(default_factory=list)
    related: List[str] = field(default_factory=list)
    broader: List[str] = field(default_factory=list)

    def bucket(self, bucket: RelationBucket) -> List[str]:
        return getattr(self, bucket.value)

    def bucket_of(self, title: str) -> Optional[RelationBucket]:
        for bucket in BUCKET_ORDER:
            if title in self.bucket(bucket):
                return bucket
        return None


@dataclass(frozen=True)
class RelatedArticle:
    title: str
    extract: str
    type: RelationType
    image: Optional[PageImage] = None


@dataclass(frozen=True)
class ArticleViewModel:
    """
    Everything the presentation layer needs to render one article.
    Superseded wholesale on each navigation, never patched in place.
    """

    title: str
    definition: str
    category: str
    related_articles: List[RelatedArticle]
    image: Optional[PageImage] = None
    category_icon: str = "globe"


@dataclass
class HealthStatus:
    name: str
    healthy: bool = True
    last_error: Optional[str] = None
    last_success: Optional[datetime] = None
    requests: int = 0
    failures: int = 0
    latency_ms: Optional[float] = None
