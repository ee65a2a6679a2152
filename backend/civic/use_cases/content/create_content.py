import logging
from typing import Any

from ...access.contract import VisibilityMode, normalize_commune_id
from ...access.engine import authorize_creation, capabilities
from ...access.principal import Principal
from ...access.publication import utcnow
from ...access.scope import EffectiveScope
from ...access.visibility import parse_visibility_item
from ...domain.content import ContentItem, ContentKind
from ...domain.ports.content import ContentRepository
from ...schemas.content import ContentCreate, ContentRead

logger = logging.getLogger(__name__)


def _default_commune(principal: Principal, scope: EffectiveScope) -> str | None:
    if principal.is_admin:
        return principal.home_commune_id
    if not scope.is_all:
        return scope.as_header_value()
    return None


def build_creation_payload(
    payload: ContentCreate,
    principal: Principal,
    scope: EffectiveScope,
    kind: ContentKind,
) -> dict[str, Any]:
    wire = payload.to_wire()
    wire["kind"] = kind.value
    wire["authorId"] = principal.id
    mode = str(wire.get("visibility") or "").strip().lower()
    # A local item without commune lands in the acting commune
    if mode == VisibilityMode.LOCAL and not normalize_commune_id(wire.get("communeId")):
        wire["communeId"] = _default_commune(principal, scope)
    return wire


async def create_content(
    content_repo: ContentRepository,
    principal: Principal,
    scope: EffectiveScope,
    kind: ContentKind,
    payload: ContentCreate,
) -> ContentRead:
    wire = build_creation_payload(payload, principal, scope, kind)
    item = parse_visibility_item(wire, ContentItem)
    item = authorize_creation(principal, item)

    now = utcnow()
    item = item.model_copy(update={"created_at": now, "updated_at": now})
    try:
        stored = await content_repo.add(item)
        await content_repo.commit()
    except Exception:
        await content_repo.rollback()
        raise

    logger.info(
        "content_created kind=%s item_id=%s principal_id=%s visibility=%s",
        kind.value,
        stored.id,
        principal.id,
        stored.mode.value,
    )
    return ContentRead.from_item(stored, capabilities(principal, scope, stored, now=now))
