import logging
from typing import Any

from ...access.engine import authorize_update, capabilities
from ...access.principal import Principal
from ...access.publication import utcnow
from ...access.scope import EffectiveScope
from ...access.visibility import WIRE_VISIBILITY_KEYS, parse_visibility_item, to_wire
from ...domain.content import ContentItem, ContentKind
from ...domain.ports.content import ContentRepository
from ...schemas.content import ContentRead, ContentUpdate
from .get_content import get_viewable_item

logger = logging.getLogger(__name__)


def merge_update(current: ContentItem, changes: dict[str, Any]) -> dict[str, Any]:
    """
    Overlay a partial update on the current item's wire form.

    The visibility triple is replaced as a whole when the update names any
    part of it, so switching the mode never inherits a stale commune or
    audience.
    """
    merged = to_wire(current)
    merged.update(
        {
            "kind": current.kind.value,
            "title": current.title,
            "body": current.body,
            "category": current.category,
        }
    )
    if any(key in changes for key in WIRE_VISIBILITY_KEYS):
        for key in WIRE_VISIBILITY_KEYS:
            merged[key] = None
        merged["visibility"] = current.mode.value
    merged.update(changes)
    return merged


async def update_content(
    content_repo: ContentRepository,
    principal: Principal,
    scope: EffectiveScope,
    kind: ContentKind,
    item_id: str,
    payload: ContentUpdate,
) -> ContentRead:
    now = utcnow()
    current = await get_viewable_item(content_repo, principal, scope, kind, item_id, now=now)

    proposed = parse_visibility_item(merge_update(current, payload.changes()), ContentItem)
    item = authorize_update(principal, scope, current, proposed).touched(now)

    try:
        stored = await content_repo.update(item)
        await content_repo.commit()
    except Exception:
        await content_repo.rollback()
        raise

    logger.info(
        "content_updated kind=%s item_id=%s principal_id=%s",
        kind.value,
        stored.id,
        principal.id,
    )
    return ContentRead.from_item(stored, capabilities(principal, scope, stored, now=now))
