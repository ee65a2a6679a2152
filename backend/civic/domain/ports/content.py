from __future__ import annotations

from datetime import datetime
from typing import Protocol

from ..content import ContentItem, ContentKind


class ContentRepository(Protocol):
    async def get(self, kind: ContentKind, item_id: str) -> ContentItem | None:
        ...

    async def list(
        self,
        kind: ContentKind,
        *,
        created_after: datetime | None = None,
        category: str | None = None,
        commune_id: str | None = None,
    ) -> list[ContentItem]:
        """Candidates for a listing.

        ``commune_id`` narrows to items that can reach that commune; the
        authorization engine still makes the final decision.
        """
        ...

    async def add(self, item: ContentItem) -> ContentItem:
        ...

    async def update(self, item: ContentItem) -> ContentItem:
        ...

    async def remove(self, kind: ContentKind, item_id: str) -> bool:
        ...

    async def commit(self) -> None:
        ...

    async def rollback(self) -> None:
        ...

