"""
Console content endpoints.

One router serves every content kind. Each request runs under the caller's
effective scope:
- listings silently drop what the caller may not view
- a single item the caller may not view answers 404, like a missing one
- writes go through the creation and update guards
"""
from fastapi import APIRouter, Depends, Query, Response, status

from ...access.principal import Principal
from ...access.scope import EffectiveScope
from ...dependencies import get_content_repository, get_effective_principal, get_effective_scope
from ...domain.content import ContentKind
from ...domain.ports.content import ContentRepository
from ...schemas.content import ContentCreate, ContentListResponse, ContentRead, ContentUpdate
from ...use_cases.content.create_content import create_content
from ...use_cases.content.delete_content import delete_content
from ...use_cases.content.get_content import get_content
from ...use_cases.content.list_content import list_content
from ...use_cases.content.update_content import update_content

router = APIRouter(tags=["admin-content"])


@router.get("/{kind}", response_model=ContentListResponse)
async def list_items(
    kind: ContentKind,
    live_only: bool = Query(False, description="Keep only items inside their publication window"),
    period: int | None = Query(None, ge=1, le=3650, description="Created within the last N days"),
    category: str | None = Query(None, max_length=64, description="Exact category match"),
    principal: Principal = Depends(get_effective_principal),
    scope: EffectiveScope = Depends(get_effective_scope),
    content_repo: ContentRepository = Depends(get_content_repository),
) -> ContentListResponse:
    return await list_content(
        content_repo,
        principal,
        scope,
        kind,
        live_only=live_only,
        period_days=period,
        category=category,
    )


@router.get("/{kind}/{item_id}", response_model=ContentRead)
async def get_item(
    kind: ContentKind,
    item_id: str,
    principal: Principal = Depends(get_effective_principal),
    scope: EffectiveScope = Depends(get_effective_scope),
    content_repo: ContentRepository = Depends(get_content_repository),
) -> ContentRead:
    return await get_content(content_repo, principal, scope, kind, item_id)


@router.post("/{kind}", response_model=ContentRead, status_code=status.HTTP_201_CREATED)
async def create_item(
    kind: ContentKind,
    payload: ContentCreate,
    principal: Principal = Depends(get_effective_principal),
    scope: EffectiveScope = Depends(get_effective_scope),
    content_repo: ContentRepository = Depends(get_content_repository),
) -> ContentRead:
    return await create_content(content_repo, principal, scope, kind, payload)


@router.patch("/{kind}/{item_id}", response_model=ContentRead)
async def update_item(
    kind: ContentKind,
    item_id: str,
    payload: ContentUpdate,
    principal: Principal = Depends(get_effective_principal),
    scope: EffectiveScope = Depends(get_effective_scope),
    content_repo: ContentRepository = Depends(get_content_repository),
) -> ContentRead:
    return await update_content(content_repo, principal, scope, kind, item_id, payload)


@router.delete("/{kind}/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    kind: ContentKind,
    item_id: str,
    principal: Principal = Depends(get_effective_principal),
    scope: EffectiveScope = Depends(get_effective_scope),
    content_repo: ContentRepository = Depends(get_content_repository),
) -> Response:
    await delete_content(content_repo, principal, scope, kind, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
