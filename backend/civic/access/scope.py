from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .contract import SCOPED_ROLES, Role, normalize_commune_id
from .errors import UnauthorizedError
from .principal import Principal


class _AllCommunes:
    """Sentinel for an unrestricted scope. Only a superadmin can hold it."""

    _instance: "_AllCommunes | None" = None

    def __new__(cls) -> "_AllCommunes":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ALL_COMMUNES"


ALL_COMMUNES: Final = _AllCommunes()


@dataclass(frozen=True)
class EffectiveScope:
    acting_commune_id: str | _AllCommunes

    def __post_init__(self) -> None:
        if self.acting_commune_id is ALL_COMMUNES:
            return
        commune_id = normalize_commune_id(self.acting_commune_id)
        if not commune_id:
            raise ValueError("EffectiveScope requires a commune or ALL_COMMUNES")
        object.__setattr__(self, "acting_commune_id", commune_id)

    @property
    def is_all(self) -> bool:
        return self.acting_commune_id is ALL_COMMUNES

    def includes(self, commune_id: str | None) -> bool:
        if self.is_all:
            return True
        return commune_id is not None and self.acting_commune_id == normalize_commune_id(commune_id)

    def as_header_value(self) -> str:
        return "" if self.is_all else str(self.acting_commune_id)


def resolve_scope(
    principal: Principal | None,
    requested_commune_id: str | None = None,
) -> EffectiveScope:
    """
    Compute the commune scope the caller operates under.

    An admin is pinned to their home commune whatever is requested. A
    superadmin picks a commune per request, or gets every commune.

    Raises:
        UnauthorizedError: If there is no principal or its role is ``user``
    """
    if principal is None:
        raise UnauthorizedError("principal_missing")

    if principal.role not in SCOPED_ROLES:
        raise UnauthorizedError(
            "role_not_scoped",
            details={"principal_id": principal.id, "role": principal.role.value},
        )

    if principal.role == Role.ADMIN:
        assert principal.home_commune_id is not None
        return EffectiveScope(acting_commune_id=principal.home_commune_id)

    requested = normalize_commune_id(requested_commune_id)
    if requested:
        return EffectiveScope(acting_commune_id=requested)
    return EffectiveScope(acting_commune_id=ALL_COMMUNES)
