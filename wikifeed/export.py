"""
Plain-dict rendering of view-models for JSON consumers (CLI, web front ends).
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from wikifeed.models import ArticleViewModel, PageImage, RelatedArticle


def _image_to_dict(image: Optional[PageImage]) -> Optional[Dict[str, Any]]:
    if image is None:
        return None
    return {"url": image.url, "caption": image.caption, "position": image.position}


def _related_to_dict(article: RelatedArticle) -> Dict[str, Any]:
    return {
        "title": article.title,
        "extract": article.extract,
        "image": _image_to_dict(article.image),
        "type": article.type.value,
    }


def view_model_to_dict(view: ArticleViewModel) -> Dict[str, Any]:
    return {
        "title": view.title,
        "definition": view.definition,
        "image": _image_to_dict(view.image),
        "category": view.category,
        "categoryIcon": view.category_icon,
        "relatedArticles": [_related_to_dict(article) for article in view.related_articles],
        "fetchedAt": datetime.now(timezone.utc).isoformat(),
    }
