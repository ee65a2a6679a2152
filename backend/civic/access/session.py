"""
Tenant-selection and impersonation context.

Two independent axes, both reserved to a superadmin:

Commune selection:
    ALL --select_commune(c)--> SELECTED(c) --clear_selection()--> ALL

Impersonation:
    NORMAL --impersonate(p)--> IMPERSONATING(original) --revert()--> NORMAL

The context is an immutable value threaded through calls: every transition
returns a new context and the previous one is left untouched. While
impersonating, ``principal`` IS the borrowed identity, so every engine call
sees the impersonated role and commune, never the superadmin's.

Invariants:
- Only one level of impersonation; IMPERSONATING -> IMPERSONATING is rejected
- Only staff (admin or superadmin) identities can be borrowed
- The selected commune only reaches ``resolve_scope`` for a superadmin
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping

from .contract import Role, normalize_commune_id
from .errors import ForbiddenError, InvalidImpersonationTransitionError
from .principal import Principal
from .scope import EffectiveScope, resolve_scope


@dataclass(frozen=True)
class SessionContext:
    principal: Principal
    selected_commune_id: str | None = None

    def __post_init__(self) -> None:
        selected = normalize_commune_id(self.selected_commune_id) or None
        object.__setattr__(self, "selected_commune_id", selected)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def effective_principal(self) -> Principal:
        return self.principal

    @property
    def original_principal(self) -> Principal:
        return self.principal.impersonating or self.principal

    @property
    def is_impersonating(self) -> bool:
        return self.principal.impersonating is not None

    @property
    def requested_commune_id(self) -> str | None:
        if self.principal.role != Role.SUPERADMIN:
            return None
        return self.selected_commune_id

    def scope(self, requested_commune_id: str | None = None) -> EffectiveScope:
        """Resolve the scope, a per-request commune taking precedence over the stored selection."""
        requested = normalize_commune_id(requested_commune_id) or self.requested_commune_id
        return resolve_scope(self.principal, requested)

    # ------------------------------------------------------------------
    # Commune selection
    # ------------------------------------------------------------------

    def _require_superadmin(self, action: str) -> None:
        if self.principal.role != Role.SUPERADMIN:
            raise ForbiddenError(
                f"{action}_requires_superadmin",
                details={"principal_id": self.principal.id, "role": self.principal.role.value},
            )

    def select_commune(self, commune_id: str | None) -> SessionContext:
        self._require_superadmin("select_commune")
        return replace(self, selected_commune_id=normalize_commune_id(commune_id) or None)

    def clear_selection(self) -> SessionContext:
        self._require_superadmin("clear_selection")
        return replace(self, selected_commune_id=None)

    # ------------------------------------------------------------------
    # Impersonation
    # ------------------------------------------------------------------

    def ensure_can_impersonate(self, target_id: str | None = None) -> None:
        """Check the transition is open before the target is even looked up."""
        if self.is_impersonating:
            raise InvalidImpersonationTransitionError(
                "nested_impersonation",
                details={
                    "original_id": self.original_principal.id,
                    "current_id": self.principal.id,
                    "target_id": target_id,
                },
            )
        self._require_superadmin("impersonate")

    def impersonate(self, target: Principal) -> SessionContext:
        self.ensure_can_impersonate(target.id)
        if target.id == self.principal.id:
            raise InvalidImpersonationTransitionError(
                "self_impersonation",
                details={"principal_id": self.principal.id},
            )
        if target.role < Role.ADMIN:
            # A borrowed identity must be able to operate under a commune scope
            raise ForbiddenError(
                "impersonation_target_not_staff",
                details={"target_id": target.id, "role": target.role.value},
            )
        borrowed = target.without_impersonation().as_impersonated_by(self.principal)
        return replace(self, principal=borrowed)

    def revert(self) -> SessionContext:
        if not self.is_impersonating:
            raise InvalidImpersonationTransitionError(
                "no_active_impersonation",
                details={"principal_id": self.principal.id},
            )
        assert self.principal.impersonating is not None
        return replace(self, principal=self.principal.impersonating)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "principal": self.principal.to_dict(),
            "selectedCommuneId": self.selected_commune_id,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SessionContext:
        return cls(
            principal=Principal.from_dict(data["principal"]),
            selected_commune_id=data.get("selectedCommuneId"),
        )
