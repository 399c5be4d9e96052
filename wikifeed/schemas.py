"""
Pydantic models for the wiki API payloads (action=query, format=json).

Only the fields the feed reads are declared; everything else is ignored.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, field_validator


class TitleRef(BaseModel):
    title: str
    ns: Optional[int] = None

    @field_validator("title", mode="before")
    @classmethod
    def _trim_title(cls, value: str) -> str:
        return (value or "").strip()


class OriginalImage(BaseModel):
    source: str
    width: Optional[int] = None
    height: Optional[int] = None


class WikiPage(BaseModel):
    title: str = ""
    pageid: Optional[int] = None
    extract: Optional[str] = None
    missing: bool = False
    invalid: bool = False
    categories: List[TitleRef] = []
    links: List[TitleRef] = []
    original: Optional[OriginalImage] = None
    thumbnail: Optional[OriginalImage] = None
    pageimage: Optional[str] = None

    @field_validator("missing", "invalid", mode="before")
    @classmethod
    def _flag_present(cls, value: Any) -> bool:
        # formatversion=1 marks flags with an empty string
        if value is None:
            return False
        if isinstance(value, str):
            return True
        return bool(value)

    @property
    def image_source(self) -> Optional[str]:
        if self.original:
            return self.original.source
        if self.thumbnail:
            return self.thumbnail.source
        return None


class QueryBody(BaseModel):
    pages: Dict[str, WikiPage] = {}
    search: List[TitleRef] = []
    random: List[TitleRef] = []


class QueryResponse(BaseModel):
    query: QueryBody = QueryBody()

    def first_page(self) -> Optional[WikiPage]:
        for page in self.query.pages.values():
            return page
        return None

    def page_list(self) -> List[WikiPage]:
        return list(self.query.pages.values())
