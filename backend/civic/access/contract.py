"""
Access contract - roles, visibility modes and priorities.

This module defines the closed vocabularies the authorization engine works with:
- Roles, totally ordered: user < admin < superadmin
- Visibility modes: local, global, custom
- Priorities: normal, pinned, urgent (ordering/emphasis only)

These sets are closed. Values outside them are rejected at the boundary,
never mapped to a default.
"""
from __future__ import annotations

from enum import Enum
from typing import Final


# ============================================================================
# ROLES - TOTALLY ORDERED
# ============================================================================

class Role(str, Enum):
    """
    Principal roles.

    Comparison follows rank, not the string value:
    Role.USER < Role.ADMIN < Role.SUPERADMIN
    """
    USER = "user"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"

    @property
    def rank(self) -> int:
        return _ROLE_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Role):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Role):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Role):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Role):
            return NotImplemented
        return self.rank >= other.rank


_ROLE_RANK: Final[dict[Role, int]] = {
    Role.USER: 0,
    Role.ADMIN: 1,
    Role.SUPERADMIN: 2,
}

ALL_ROLES: Final[frozenset[str]] = frozenset(role.value for role in Role)

# Roles that may operate under a commune scope at all
SCOPED_ROLES: Final[frozenset[Role]] = frozenset({Role.ADMIN, Role.SUPERADMIN})


# ============================================================================
# VISIBILITY MODES
# ============================================================================

class VisibilityMode(str, Enum):
    LOCAL = "local"        # one commune
    GLOBAL = "global"      # every commune
    CUSTOM = "custom"      # an explicit list of communes


ALLOWED_VISIBILITY_MODES: Final[frozenset[str]] = frozenset(mode.value for mode in VisibilityMode)


# ============================================================================
# PRIORITIES
# ============================================================================

class Priority(str, Enum):
    NORMAL = "normal"
    PINNED = "pinned"
    URGENT = "urgent"


# Listing order: urgent first, then pinned, then normal
PRIORITY_ORDER: Final[dict[Priority, int]] = {
    Priority.URGENT: 0,
    Priority.PINNED: 1,
    Priority.NORMAL: 2,
}


# ============================================================================
# VALIDATION
# ============================================================================

def parse_role(value: str | Role) -> Role:
    """
    Parse a role from its wire value.

    Raises:
        ValueError: If the role is not part of the contract
    """
    if isinstance(value, Role):
        return value
    normalized = str(value or "").strip().lower()
    if normalized not in ALL_ROLES:
        raise ValueError(
            f"Invalid role '{value}'. "
            f"Must be one of: {', '.join(sorted(ALL_ROLES))}"
        )
    return Role(normalized)


def normalize_commune_id(value: object) -> str:
    """Communes are compared trimmed and case-insensitively."""
    if value is None:
        return ""
    return str(value).strip().lower()
