from datetime import datetime

from ...access.engine import can_view, capabilities
from ...access.principal import Principal
from ...access.publication import utcnow
from ...access.scope import EffectiveScope
from ...domain.content import ContentItem, ContentKind
from ...domain.ports.content import ContentRepository
from ...errors import NotFoundError
from ...schemas.content import ContentRead


async def get_viewable_item(
    content_repo: ContentRepository,
    principal: Principal,
    scope: EffectiveScope,
    kind: ContentKind,
    item_id: str,
    *,
    now: datetime | None = None,
) -> ContentItem:
    """Load an item the caller may see; anything else is indistinguishable from missing."""
    item = await content_repo.get(kind, item_id)
    if item is None or not can_view(principal, scope, item, now=now):
        raise NotFoundError("Content not found")
    return item


async def get_content(
    content_repo: ContentRepository,
    principal: Principal,
    scope: EffectiveScope,
    kind: ContentKind,
    item_id: str,
) -> ContentRead:
    now = utcnow()
    item = await get_viewable_item(content_repo, principal, scope, kind, item_id, now=now)
    return ContentRead.from_item(item, capabilities(principal, scope, item, now=now))
