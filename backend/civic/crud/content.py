import uuid
from datetime import datetime

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..access.visibility import CustomVisibility, LocalVisibility
from ..domain.content import ContentItem, ContentKind
from ..domain.ports.content import ContentRepository as ContentRepositoryPort
from ..models.content_item import ContentItemRecord


def _parse_uuid(item_id: str) -> uuid.UUID | None:
    try:
        return uuid.UUID(str(item_id))
    except ValueError:
        return None


def record_to_item(record: ContentItemRecord) -> ContentItem:
    if record.visibility == "local":
        visibility: dict = {"mode": "local", "commune_id": record.commune_id}
    elif record.visibility == "custom":
        visibility = {"mode": "custom", "audience_communes": list(record.audience_communes or [])}
    else:
        visibility = {"mode": "global"}
    return ContentItem.model_validate(
        {
            "id": str(record.id),
            "kind": record.kind,
            "title": record.title,
            "body": record.body,
            "category": record.category,
            "visibility": visibility,
            "priority": record.priority,
            "start_at": record.start_at,
            "end_at": record.end_at,
            "author_id": record.author_id,
            "created_at": record.created_at,
            "updated_at": record.updated_at,
        }
    )


def _apply_item(record: ContentItemRecord, item: ContentItem) -> None:
    record.kind = item.kind.value
    record.title = item.title
    record.body = item.body
    record.category = item.category
    record.visibility = item.mode.value
    record.commune_id = (
        item.visibility.commune_id if isinstance(item.visibility, LocalVisibility) else None
    )
    record.audience_communes = (
        list(item.visibility.audience_communes)
        if isinstance(item.visibility, CustomVisibility)
        else None
    )
    record.priority = item.priority.value
    record.start_at = item.start_at
    record.end_at = item.end_at
    record.author_id = item.author_id


async def get_content_record(
    session: AsyncSession, kind: ContentKind, item_id: str
) -> ContentItemRecord | None:
    record_id = _parse_uuid(item_id)
    if record_id is None:
        return None
    stmt = select(ContentItemRecord).where(
        ContentItemRecord.id == record_id, ContentItemRecord.kind == kind.value
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def list_content_records(
    session: AsyncSession,
    kind: ContentKind,
    created_after: datetime | None = None,
    category: str | None = None,
    commune_id: str | None = None,
) -> list[ContentItemRecord]:
    stmt = select(ContentItemRecord).where(ContentItemRecord.kind == kind.value)
    if created_after is not None:
        stmt = stmt.where(ContentItemRecord.created_at >= created_after)
    if category:
        stmt = stmt.where(ContentItemRecord.category == category)
    if commune_id:
        # Coarse audience pre-filter; the engine still decides per item
        stmt = stmt.where(
            or_(
                ContentItemRecord.visibility == "global",
                ContentItemRecord.commune_id == commune_id,
                ContentItemRecord.audience_communes.contains([commune_id]),
            )
        )
    stmt = stmt.order_by(ContentItemRecord.created_at.desc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


class ContentRepository(ContentRepositoryPort):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, kind: ContentKind, item_id: str) -> ContentItem | None:
        record = await get_content_record(self._session, kind, item_id)
        return record_to_item(record) if record is not None else None

    async def list(
        self,
        kind: ContentKind,
        *,
        created_after: datetime | None = None,
        category: str | None = None,
        commune_id: str | None = None,
    ) -> list[ContentItem]:
        records = await list_content_records(
            self._session, kind, created_after, category, commune_id
        )
        return [record_to_item(record) for record in records]

    async def add(self, item: ContentItem) -> ContentItem:
        record = ContentItemRecord(id=uuid.uuid4())
        _apply_item(record, item)
        self._session.add(record)
        await self._session.flush()
        await self._session.refresh(record)
        return record_to_item(record)

    async def update(self, item: ContentItem) -> ContentItem:
        if item.id is None:
            raise ValueError("Cannot update a content item without id")
        record = await get_content_record(self._session, item.kind, item.id)
        if record is None:
            raise LookupError(f"Content item {item.id} not found")
        _apply_item(record, item)
        await self._session.flush()
        await self._session.refresh(record)
        return record_to_item(record)

    async def remove(self, kind: ContentKind, item_id: str) -> bool:
        record = await get_content_record(self._session, kind, item_id)
        if record is None:
            return False
        await self._session.delete(record)
        await self._session.flush()
        return True

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()
