from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping

from .contract import Role, normalize_commune_id, parse_role


@dataclass(frozen=True)
class Principal:
    """Resolved identity of the caller.

    ``impersonating`` is the original principal while a superadmin operates
    under this borrowed identity. It is set by the session context only.
    """

    id: str
    role: Role
    home_commune_id: str | None = None
    email: str | None = field(default=None, compare=False)
    impersonating: Principal | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        principal_id = str(self.id or "").strip()
        if not principal_id:
            raise ValueError("Principal id must not be empty")
        object.__setattr__(self, "id", principal_id)
        object.__setattr__(self, "role", parse_role(self.role))

        home = normalize_commune_id(self.home_commune_id) or None
        object.__setattr__(self, "home_commune_id", home)

        if self.role == Role.ADMIN and home is None:
            raise ValueError(f"Admin principal '{principal_id}' must have a home commune")

    @property
    def is_superadmin(self) -> bool:
        return self.role == Role.SUPERADMIN

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_impersonated(self) -> bool:
        return self.impersonating is not None

    def as_impersonated_by(self, original: Principal) -> Principal:
        return replace(self, impersonating=original)

    def without_impersonation(self) -> Principal:
        return replace(self, impersonating=None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "role": self.role.value,
            "communeId": self.home_commune_id,
            "email": self.email,
            "impersonating": self.impersonating.to_dict() if self.impersonating else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Principal:
        original = data.get("impersonating")
        return cls(
            id=data["id"],
            role=data["role"],
            home_commune_id=data.get("communeId"),
            email=data.get("email"),
            impersonating=cls.from_dict(original) if original else None,
        )
