"""
Commune visibility and role-scoped authorization.

Pure, synchronous building blocks shared by the API boundary and any client
that mirrors the decisions for UX:
- Principal and roles (principal, contract)
- Scope resolution (scope)
- Visibility model (visibility)
- Publication window (publication)
- Authorization engine (engine)
- Tenant-selection and impersonation context (session)
"""
from .contract import Priority, Role, VisibilityMode
from .engine import (
    Capabilities,
    authorize_creation,
    authorize_update,
    can_change_visibility,
    can_delete,
    can_edit,
    can_view,
    capabilities,
    require_delete,
    require_edit,
    require_view,
    visible_items,
)
from .errors import (
    AccessDomainError,
    ForbiddenError,
    InvalidImpersonationTransitionError,
    InvalidVisibilityShapeError,
    UnauthorizedError,
)
from .principal import Principal
from .publication import is_live
from .scope import ALL_COMMUNES, EffectiveScope, resolve_scope
from .session import SessionContext
from .visibility import (
    CustomVisibility,
    GlobalVisibility,
    LocalVisibility,
    VisibilityItem,
    parse_visibility_item,
    to_wire,
)

__all__ = [
    "ALL_COMMUNES",
    "AccessDomainError",
    "Capabilities",
    "CustomVisibility",
    "EffectiveScope",
    "ForbiddenError",
    "GlobalVisibility",
    "InvalidImpersonationTransitionError",
    "InvalidVisibilityShapeError",
    "LocalVisibility",
    "Principal",
    "Priority",
    "Role",
    "SessionContext",
    "UnauthorizedError",
    "VisibilityItem",
    "VisibilityMode",
    "authorize_creation",
    "authorize_update",
    "can_change_visibility",
    "can_delete",
    "can_edit",
    "can_view",
    "capabilities",
    "is_live",
    "parse_visibility_item",
    "require_delete",
    "require_edit",
    "require_view",
    "resolve_scope",
    "to_wire",
    "visible_items",
]
