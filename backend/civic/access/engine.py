"""
Authorization engine - one decision for every content type.

The predicates here are total: they return a boolean and never raise, so a
client can mirror them for UX (disabling an edit button) while the API
boundary stays the enforcement point. The ``require_*`` and ``authorize_*``
helpers turn a negative decision into ``ForbiddenError`` for the server.

Rules:
- view:   audience match (global / local commune / custom membership) AND
          live, unless the viewer is the author or a superadmin
- edit:   superadmin; or the admin author while the item is still in the
          admin's own commune (or not local)
- delete: same rule as edit
- change visibility: superadmin only
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, TypeVar

from .contract import PRIORITY_ORDER, Role, VisibilityMode
from .errors import ForbiddenError, UnauthorizedError
from .principal import Principal
from .publication import is_live, utcnow
from .scope import EffectiveScope
from .visibility import LocalVisibility, VisibilityItem

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT", bound=VisibilityItem)


@dataclass(frozen=True)
class Capabilities:
    can_view: bool
    can_edit: bool
    can_delete: bool
    can_change_visibility: bool
    is_live: bool

    def to_dict(self) -> dict[str, bool]:
        return {
            "canView": self.can_view,
            "canEdit": self.can_edit,
            "canDelete": self.can_delete,
            "canChangeVisibility": self.can_change_visibility,
            "isLive": self.is_live,
        }


NO_CAPABILITIES = Capabilities(False, False, False, False, False)


# ============================================================================
# PREDICATES - TOTAL, NEVER RAISE
# ============================================================================

def in_audience(scope: EffectiveScope, item: VisibilityItem) -> bool:
    """Whether the item targets the scope's commune, ignoring time."""
    mode = item.mode
    if mode == VisibilityMode.GLOBAL:
        return True
    if scope.is_all:
        return True
    if mode == VisibilityMode.LOCAL:
        return scope.acting_commune_id == item.commune_id
    if mode == VisibilityMode.CUSTOM:
        return scope.acting_commune_id in item.audience_communes
    return False


def is_author(principal: Principal | None, item: VisibilityItem) -> bool:
    return principal is not None and principal.id == item.author_id


def can_view(
    principal: Principal | None,
    scope: EffectiveScope,
    item: VisibilityItem,
    *,
    now: datetime | None = None,
) -> bool:
    if not in_audience(scope, item):
        return False
    if is_live(item, now):
        return True
    # Outside its window the item stays reachable for editing purposes only
    if principal is None:
        return False
    return principal.role == Role.SUPERADMIN or is_author(principal, item)


def can_edit(
    principal: Principal | None,
    scope: EffectiveScope,
    item: VisibilityItem,
) -> bool:
    if principal is None:
        return False
    if principal.role == Role.SUPERADMIN:
        return True
    if principal.role == Role.ADMIN:
        if not is_author(principal, item):
            return False
        if isinstance(item.visibility, LocalVisibility):
            return item.visibility.commune_id == principal.home_commune_id
        return True
    return False


def can_delete(
    principal: Principal | None,
    scope: EffectiveScope,
    item: VisibilityItem,
) -> bool:
    return can_edit(principal, scope, item)


def can_change_visibility(
    principal: Principal | None,
    scope: EffectiveScope,
    item: VisibilityItem | None = None,
) -> bool:
    return principal is not None and principal.role == Role.SUPERADMIN


def capabilities(
    principal: Principal | None,
    scope: EffectiveScope,
    item: VisibilityItem,
    *,
    now: datetime | None = None,
) -> Capabilities:
    if now is None:
        now = utcnow()
    if not can_view(principal, scope, item, now=now):
        return NO_CAPABILITIES
    return Capabilities(
        can_view=True,
        can_edit=can_edit(principal, scope, item),
        can_delete=can_delete(principal, scope, item),
        can_change_visibility=can_change_visibility(principal, scope, item),
        is_live=is_live(item, now),
    )


def _listing_key(item: VisibilityItem) -> tuple[int, float]:
    stamp = item.start_at or item.created_at
    # Most recent first within a priority band
    return PRIORITY_ORDER[item.priority], -(stamp.timestamp() if stamp else 0.0)


def visible_items(
    principal: Principal | None,
    scope: EffectiveScope,
    items: Iterable[ItemT],
    *,
    now: datetime | None = None,
    live_only: bool = False,
) -> list[ItemT]:
    """
    Listing filter.

    Items failing ``can_view`` are dropped, never flagged, so a listing does
    not leak the existence of content outside the caller's scope.
    """
    if now is None:
        now = utcnow()
    kept = [
        item
        for item in items
        if can_view(principal, scope, item, now=now)
        and (not live_only or is_live(item, now))
    ]
    kept.sort(key=_listing_key)
    return kept


# ============================================================================
# ENFORCEMENT - RAISE ON DENIAL
# ============================================================================

def _deny(action: str, principal: Principal | None, item: VisibilityItem | None) -> ForbiddenError:
    principal_id = principal.id if principal else None
    item_id = item.id if item else None
    logger.warning(
        "access_denied action=%s principal_id=%s role=%s item_id=%s impersonated=%s",
        action,
        principal_id,
        principal.role.value if principal else None,
        item_id,
        principal.is_impersonated if principal else False,
    )
    return ForbiddenError(
        f"{action}_denied",
        details={"action": action, "principal_id": principal_id, "item_id": item_id},
    )


def require_view(
    principal: Principal | None,
    scope: EffectiveScope,
    item: VisibilityItem,
    *,
    now: datetime | None = None,
) -> None:
    if not can_view(principal, scope, item, now=now):
        raise _deny("view", principal, item)


def require_edit(principal: Principal | None, scope: EffectiveScope, item: VisibilityItem) -> None:
    if not can_edit(principal, scope, item):
        raise _deny("edit", principal, item)


def require_delete(principal: Principal | None, scope: EffectiveScope, item: VisibilityItem) -> None:
    if not can_delete(principal, scope, item):
        raise _deny("delete", principal, item)


def authorize_creation(principal: Principal | None, item: ItemT) -> ItemT:
    """
    Apply the creation guard and return the item as it will be stored.

    The author is always the creating principal. An admin can only produce
    a local item, and its commune is forced to the admin's home commune.

    Raises:
        UnauthorizedError: If the principal is missing or has role ``user``
        ForbiddenError: If an admin asks for a global or custom visibility
    """
    if principal is None or principal.role < Role.ADMIN:
        raise UnauthorizedError(
            "create_requires_staff",
            details={"principal_id": principal.id if principal else None},
        )

    stamped = item.model_copy(update={"author_id": principal.id})
    if principal.role == Role.SUPERADMIN:
        return stamped

    if not isinstance(item.visibility, LocalVisibility):
        raise _deny("create_visibility", principal, item)
    assert principal.home_commune_id is not None
    return stamped.model_copy(
        update={"visibility": LocalVisibility(commune_id=principal.home_commune_id)}
    )


def authorize_update(
    principal: Principal | None,
    scope: EffectiveScope,
    current: ItemT,
    proposed: ItemT,
) -> ItemT:
    """
    Apply the update guard and return the item as it will be stored.

    The author and identifier never change through an update.

    Raises:
        ForbiddenError: If the principal may not edit, or changes visibility
            without being allowed to
    """
    require_edit(principal, scope, current)
    if proposed.visibility != current.visibility and not can_change_visibility(
        principal, scope, current
    ):
        raise _deny("change_visibility", principal, current)
    return proposed.model_copy(
        update={
            "id": current.id,
            "author_id": current.author_id,
            "created_at": current.created_at,
        }
    )
