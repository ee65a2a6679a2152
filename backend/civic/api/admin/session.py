from fastapi import APIRouter, Depends

from ...access.session import SessionContext
from ...dependencies import (
    get_principal_directory,
    get_session_context,
    get_session_id,
    get_session_store,
)
from ...domain.ports.principal import PrincipalDirectory
from ...domain.ports.session import SessionContextStore
from ...schemas.session import ImpersonateRequest, SelectCommuneRequest, SessionRead
from ...use_cases.session.impersonate import start_impersonation, stop_impersonation
from ...use_cases.session.select_commune import clear_commune_selection, select_commune

router = APIRouter(prefix="/session", tags=["session"])


@router.get("", response_model=SessionRead)
async def read_session(
    context: SessionContext = Depends(get_session_context),
) -> SessionRead:
    return SessionRead.from_context(context)


@router.put("/commune", response_model=SessionRead)
async def put_commune(
    payload: SelectCommuneRequest,
    context: SessionContext = Depends(get_session_context),
    session_id: str = Depends(get_session_id),
    store: SessionContextStore = Depends(get_session_store),
) -> SessionRead:
    return await select_commune(store, session_id, context, payload.commune_id)


@router.delete("/commune", response_model=SessionRead)
async def delete_commune(
    context: SessionContext = Depends(get_session_context),
    session_id: str = Depends(get_session_id),
    store: SessionContextStore = Depends(get_session_store),
) -> SessionRead:
    return await clear_commune_selection(store, session_id, context)


@router.post("/impersonate", response_model=SessionRead)
async def post_impersonate(
    payload: ImpersonateRequest,
    context: SessionContext = Depends(get_session_context),
    session_id: str = Depends(get_session_id),
    store: SessionContextStore = Depends(get_session_store),
    directory: PrincipalDirectory = Depends(get_principal_directory),
) -> SessionRead:
    return await start_impersonation(store, directory, session_id, context, payload.principal_id)


@router.delete("/impersonate", response_model=SessionRead)
async def delete_impersonate(
    context: SessionContext = Depends(get_session_context),
    session_id: str = Depends(get_session_id),
    store: SessionContextStore = Depends(get_session_store),
) -> SessionRead:
    return await stop_impersonation(store, session_id, context)
