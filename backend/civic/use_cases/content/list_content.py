from datetime import datetime, timedelta

from ...access.engine import capabilities, visible_items
from ...access.principal import Principal
from ...access.publication import utcnow
from ...access.scope import EffectiveScope
from ...domain.content import ContentKind
from ...domain.ports.content import ContentRepository
from ...schemas.content import ContentListResponse, ContentRead


def _created_after(period_days: int | None, now: datetime) -> datetime | None:
    if period_days is None:
        return None
    return now - timedelta(days=period_days)


async def list_content(
    content_repo: ContentRepository,
    principal: Principal,
    scope: EffectiveScope,
    kind: ContentKind,
    *,
    live_only: bool = False,
    period_days: int | None = None,
    category: str | None = None,
    now: datetime | None = None,
) -> ContentListResponse:
    if now is None:
        now = utcnow()
    candidates = await content_repo.list(
        kind,
        created_after=_created_after(period_days, now),
        category=(category or "").strip() or None,
        commune_id=None if scope.is_all else str(scope.acting_commune_id),
    )
    items = visible_items(principal, scope, candidates, now=now, live_only=live_only)
    return ContentListResponse(
        items=[
            ContentRead.from_item(item, capabilities(principal, scope, item, now=now))
            for item in items
        ],
        total=len(items),
    )
