import time
from typing import Any, Dict

import jwt

from ..access.principal import Principal
from ..config import settings


class InvalidTokenError(Exception):
    """Raised when a token cannot be parsed or is malformed."""


class ExpiredTokenError(Exception):
    """Raised when a token has expired."""


def _parse_token_payload(token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except jwt.ExpiredSignatureError as exc:
        raise ExpiredTokenError from exc
    except jwt.InvalidTokenError as exc:
        raise InvalidTokenError from exc


def validate_access_token(token: str) -> Dict[str, Any]:
    payload = _parse_token_payload(token)

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject.strip():
        raise InvalidTokenError()
    if not isinstance(payload.get("role"), str):
        raise InvalidTokenError()

    return payload


def principal_from_claims(payload: Dict[str, Any]) -> Principal:
    commune_id = payload.get("communeId")
    email = payload.get("email")
    try:
        return Principal(
            id=payload["sub"],
            role=payload["role"],
            home_commune_id=commune_id if isinstance(commune_id, str) else None,
            email=email if isinstance(email, str) else None,
        )
    except (KeyError, ValueError) as exc:
        raise InvalidTokenError from exc


def session_id_from_claims(payload: Dict[str, Any]) -> str:
    session_id = payload.get("sid")
    if isinstance(session_id, str) and session_id.strip():
        return session_id.strip()
    return str(payload["sub"])


def issue_access_token(
    principal: Principal,
    *,
    session_id: str | None = None,
    expires_in_seconds: int | None = None,
) -> str:
    """Sign a token for a principal. Used by tests and local tooling."""
    claims: Dict[str, Any] = {
        "sub": principal.id,
        "role": principal.role.value,
    }
    if principal.home_commune_id:
        claims["communeId"] = principal.home_commune_id
    if principal.email:
        claims["email"] = principal.email
    if session_id:
        claims["sid"] = session_id
    if expires_in_seconds is not None:
        claims["exp"] = int(time.time()) + expires_in_seconds
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)
