import logging

from ...access.engine import require_delete
from ...access.principal import Principal
from ...access.scope import EffectiveScope
from ...domain.content import ContentKind
from ...domain.ports.content import ContentRepository
from ...errors import NotFoundError
from .get_content import get_viewable_item

logger = logging.getLogger(__name__)


async def delete_content(
    content_repo: ContentRepository,
    principal: Principal,
    scope: EffectiveScope,
    kind: ContentKind,
    item_id: str,
) -> None:
    item = await get_viewable_item(content_repo, principal, scope, kind, item_id)
    require_delete(principal, scope, item)

    try:
        removed = await content_repo.remove(kind, item_id)
        if not removed:
            raise NotFoundError("Content not found")
        await content_repo.commit()
    except Exception:
        await content_repo.rollback()
        raise

    logger.info(
        "content_deleted kind=%s item_id=%s principal_id=%s",
        kind.value,
        item_id,
        principal.id,
    )
