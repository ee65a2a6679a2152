"""
Wire schemas for the content endpoints.

The request schemas only check types. The visibility union and the
publication window are validated by ``parse_visibility_item`` so that the
rules live in one place and surface as ``InvalidVisibilityShapeError`` (422).
"""
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..access.engine import Capabilities
from ..access.visibility import to_wire
from ..domain.content import ContentItem


class ContentCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, max_length=255)
    body: str = ""
    category: str | None = Field(default=None, max_length=64)
    visibility: str = "local"
    commune_id: str | None = Field(default=None, alias="communeId")
    audience_communes: list[str] | str | None = Field(default=None, alias="audienceCommunes")
    priority: str = "normal"
    start_at: datetime | None = Field(default=None, alias="startAt")
    end_at: datetime | None = Field(default=None, alias="endAt")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class ContentUpdate(BaseModel):
    """Partial update; only the fields present in the request are applied."""

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = Field(default=None, min_length=1, max_length=255)
    body: str | None = None
    category: str | None = Field(default=None, max_length=64)
    visibility: str | None = None
    commune_id: str | None = Field(default=None, alias="communeId")
    audience_communes: list[str] | str | None = Field(default=None, alias="audienceCommunes")
    priority: str | None = None
    start_at: datetime | None = Field(default=None, alias="startAt")
    end_at: datetime | None = Field(default=None, alias="endAt")

    def changes(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


class CapabilitiesRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    can_view: bool = Field(alias="canView")
    can_edit: bool = Field(alias="canEdit")
    can_delete: bool = Field(alias="canDelete")
    can_change_visibility: bool = Field(alias="canChangeVisibility")
    is_live: bool = Field(alias="isLive")


class ContentRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    kind: str
    title: str
    body: str
    category: str | None = None
    visibility: str
    commune_id: str = Field(alias="communeId")
    audience_communes: list[str] = Field(alias="audienceCommunes")
    priority: str
    start_at: datetime | None = Field(default=None, alias="startAt")
    end_at: datetime | None = Field(default=None, alias="endAt")
    author_id: str = Field(alias="authorId")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
    capabilities: CapabilitiesRead

    @classmethod
    def from_item(cls, item: ContentItem, capabilities: Capabilities) -> "ContentRead":
        wire = to_wire(item)
        return cls.model_validate(
            {
                **wire,
                "id": item.id or "",
                "kind": item.kind.value,
                "title": item.title,
                "body": item.body,
                "category": item.category,
                "startAt": item.start_at,
                "endAt": item.end_at,
                "createdAt": item.created_at,
                "updatedAt": item.updated_at,
                "capabilities": capabilities.to_dict(),
            }
        )


class ContentListResponse(BaseModel):
    items: list[ContentRead]
    total: int
