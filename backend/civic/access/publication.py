"""Publication window evaluation.

The window ``[start_at, end_at]`` is closed on both ends and each bound is
optional. It governs display to ordinary viewers only; existence and access
are decided by the engine.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from .errors import InvalidVisibilityShapeError

if TYPE_CHECKING:
    from .visibility import VisibilityItem


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def validate_window(start_at: datetime | None, end_at: datetime | None) -> None:
    """
    Reject an inverted window at construction time.

    ``start_at == end_at`` is a valid instantaneous window.

    Raises:
        InvalidVisibilityShapeError: If end_at < start_at
    """
    if start_at is not None and end_at is not None and end_at < start_at:
        raise InvalidVisibilityShapeError(
            "window_inverted",
            details={"startAt": start_at.isoformat(), "endAt": end_at.isoformat()},
        )


def is_live(item: VisibilityItem, now: datetime | None = None) -> bool:
    if now is None:
        now = utcnow()
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    if item.start_at is not None and now < item.start_at:
        return False
    if item.end_at is not None and now > item.end_at:
        return False
    return True
