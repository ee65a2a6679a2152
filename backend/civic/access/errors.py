from typing import Any


class AccessDomainError(Exception):
    """Base exception for visibility and authorization domain errors."""

    code: str = "ACCESS_ERROR"

    def __init__(self, reason: str, *, details: dict[str, Any] | None = None):
        super().__init__(reason)
        self.reason = reason
        self.details = details or {}


class InvalidVisibilityShapeError(AccessDomainError):
    """Raised when an item's visibility fields disagree with its tag or its window is inverted."""

    code = "INVALID_VISIBILITY_SHAPE"


class UnauthorizedError(AccessDomainError):
    """Raised when there is no usable principal for a scoped operation."""

    code = "UNAUTHORIZED"


class ForbiddenError(AccessDomainError):
    """Raised when a resolved principal fails a view/edit/delete/visibility check."""

    code = "FORBIDDEN"


class InvalidImpersonationTransitionError(AccessDomainError):
    """Raised on nested impersonation or on revert without an active impersonation."""

    code = "INVALID_IMPERSONATION_TRANSITION"
