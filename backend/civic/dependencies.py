from collections.abc import AsyncGenerator
from typing import Any

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from .access.principal import Principal
from .access.scope import EffectiveScope
from .access.session import SessionContext
from .config import settings
from .crud.account import AccountDirectory
from .crud.content import ContentRepository
from .crud.session_context import RedisSessionContextStore
from .database import get_session
from .domain.ports.content import ContentRepository as ContentRepositoryPort
from .domain.ports.principal import PrincipalDirectory
from .domain.ports.session import SessionContextStore
from .errors import AuthError
from .infrastructure.redis import get_redis
from .security.token_inspection import (
    ExpiredTokenError,
    InvalidTokenError,
    principal_from_claims,
    session_id_from_claims,
    validate_access_token,
)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_session():
        yield session


def get_content_repository(db: AsyncSession = Depends(get_db)) -> ContentRepositoryPort:
    return ContentRepository(db)


def get_principal_directory(db: AsyncSession = Depends(get_db)) -> PrincipalDirectory:
    return AccountDirectory(db)


def get_session_store() -> SessionContextStore:
    return RedisSessionContextStore(get_redis(), settings.session_ttl_seconds)


async def get_token_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> dict[str, Any]:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthError("Not authenticated")

    try:
        return validate_access_token(credentials.credentials)
    except ExpiredTokenError:
        raise AuthError("Token has expired") from None
    except InvalidTokenError:
        raise AuthError("Invalid token") from None


async def get_current_principal(
    claims: dict[str, Any] = Depends(get_token_claims),
) -> Principal:
    try:
        return principal_from_claims(claims)
    except InvalidTokenError:
        raise AuthError("Invalid token payload") from None


async def get_session_id(claims: dict[str, Any] = Depends(get_token_claims)) -> str:
    return session_id_from_claims(claims)


async def get_session_context(
    principal: Principal = Depends(get_current_principal),
    session_id: str = Depends(get_session_id),
    store: SessionContextStore = Depends(get_session_store),
) -> SessionContext:
    stored = await store.load(session_id)
    # A stored context only applies to the identity that created it
    if stored is None or stored.original_principal != principal:
        return SessionContext(principal=principal)
    return stored


def get_requested_commune(request: Request) -> str | None:
    return request.headers.get(settings.commune_header)


async def get_effective_scope(
    context: SessionContext = Depends(get_session_context),
    requested_commune_id: str | None = Depends(get_requested_commune),
) -> EffectiveScope:
    return context.scope(requested_commune_id)


async def get_effective_principal(
    context: SessionContext = Depends(get_session_context),
) -> Principal:
    return context.effective_principal
