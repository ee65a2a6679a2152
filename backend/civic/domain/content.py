"""Content types of the console, all sharing the visibility-bearing shape."""
from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import Field

from ..access.visibility import VisibilityItem, ensure_utc


class ContentKind(str, Enum):
    INCIDENTS = "incidents"
    NOTIFICATIONS = "notifications"
    INFOS = "infos"
    PROJECTS = "projects"
    ARTICLES = "articles"


class ContentItem(VisibilityItem):
    kind: ContentKind
    title: str = Field(..., min_length=1, max_length=255)
    body: str = ""
    category: str | None = Field(default=None, max_length=64)
    updated_at: datetime | None = None

    def touched(self, at: datetime) -> ContentItem:
        return self.model_copy(update={"updated_at": ensure_utc(at)})
