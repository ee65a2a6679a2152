import logging

from ...access.session import SessionContext
from ...domain.ports.session import SessionContextStore
from ...schemas.session import SessionRead

logger = logging.getLogger(__name__)


async def select_commune(
    store: SessionContextStore,
    session_id: str,
    context: SessionContext,
    commune_id: str,
) -> SessionRead:
    updated = context.select_commune(commune_id)
    await store.save(session_id, updated)
    logger.info(
        "commune_selected principal_id=%s commune_id=%s",
        updated.principal.id,
        updated.selected_commune_id,
    )
    return SessionRead.from_context(updated)


async def clear_commune_selection(
    store: SessionContextStore,
    session_id: str,
    context: SessionContext,
) -> SessionRead:
    updated = context.clear_selection()
    await store.save(session_id, updated)
    logger.info("commune_selection_cleared principal_id=%s", updated.principal.id)
    return SessionRead.from_context(updated)
