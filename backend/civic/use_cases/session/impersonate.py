import logging

from ...access.session import SessionContext
from ...domain.ports.principal import PrincipalDirectory
from ...domain.ports.session import SessionContextStore
from ...errors import NotFoundError
from ...schemas.session import SessionRead

logger = logging.getLogger(__name__)


async def start_impersonation(
    store: SessionContextStore,
    directory: PrincipalDirectory,
    session_id: str,
    context: SessionContext,
    principal_id: str,
) -> SessionRead:
    # Reject before the lookup so the directory is not probed by non-superadmins
    context.ensure_can_impersonate(principal_id)

    target = await directory.get(principal_id)
    if target is None:
        raise NotFoundError("Principal not found")

    updated = context.impersonate(target)
    await store.save(session_id, updated)
    logger.warning(
        "impersonation_started original_id=%s target_id=%s target_role=%s",
        updated.original_principal.id,
        target.id,
        target.role.value,
    )
    return SessionRead.from_context(updated)


async def stop_impersonation(
    store: SessionContextStore,
    session_id: str,
    context: SessionContext,
) -> SessionRead:
    updated = context.revert()
    await store.save(session_id, updated)
    logger.info(
        "impersonation_stopped original_id=%s target_id=%s",
        updated.principal.id,
        context.principal.id,
    )
    return SessionRead.from_context(updated)
