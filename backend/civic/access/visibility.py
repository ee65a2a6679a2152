"""
Visibility model - the shape every content type must satisfy.

The visibility tag and its dependent fields form a discriminated union:

    local   -> commune_id (non-empty)
    global  -> nothing
    custom  -> audience_communes (non-empty, ordered, de-duplicated)

The union is structural: a ``GlobalVisibility`` has no commune field to
populate, so the three-nullable-fields drift of the flat wire format cannot
reach the engine. The flat format is converted at the boundary by
``parse_visibility_item`` which rejects any disagreement between the tag and
the populated fields with ``InvalidVisibilityShapeError``.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Mapping, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .contract import Priority, VisibilityMode, normalize_commune_id
from .errors import InvalidVisibilityShapeError
from .publication import validate_window


def ensure_utc(value: datetime | None) -> datetime | None:
    """Naive instants are read as UTC so that every comparison is aware."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _dedupe(communes: list[str]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for commune in communes:
        normalized = normalize_commune_id(commune)
        if normalized:
            seen.setdefault(normalized, None)
    return tuple(seen)


class LocalVisibility(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: Literal["local"] = "local"
    commune_id: str

    @field_validator("commune_id", mode="before")
    @classmethod
    def _require_commune(cls, value: Any) -> str:
        commune_id = normalize_commune_id(value)
        if not commune_id:
            raise InvalidVisibilityShapeError(
                "local_requires_commune",
                details={"visibility": "local", "communeId": value},
            )
        return commune_id


class GlobalVisibility(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: Literal["global"] = "global"


class CustomVisibility(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: Literal["custom"] = "custom"
    audience_communes: tuple[str, ...]

    @field_validator("audience_communes", mode="before")
    @classmethod
    def _require_audience(cls, value: Any) -> tuple[str, ...]:
        audience = _dedupe(_as_commune_list(value))
        if not audience:
            raise InvalidVisibilityShapeError(
                "custom_requires_audience",
                details={"visibility": "custom", "audienceCommunes": value},
            )
        return audience


Visibility = Annotated[
    Union[LocalVisibility, GlobalVisibility, CustomVisibility],
    Field(discriminator="mode"),
]


class VisibilityItem(BaseModel):
    """A visibility-bearing item. Content types extend this model."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    visibility: Visibility
    priority: Priority = Priority.NORMAL
    start_at: datetime | None = None
    end_at: datetime | None = None
    author_id: str
    created_at: datetime | None = None

    @field_validator("start_at", "end_at", "created_at", mode="after")
    @classmethod
    def _aware(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)

    @field_validator("author_id", mode="before")
    @classmethod
    def _require_author(cls, value: Any) -> str:
        author_id = str(value or "").strip()
        if not author_id:
            raise InvalidVisibilityShapeError("author_required", details={"authorId": value})
        return author_id

    @model_validator(mode="after")
    def _check_window(self) -> "VisibilityItem":
        validate_window(self.start_at, self.end_at)
        return self

    @property
    def mode(self) -> VisibilityMode:
        return VisibilityMode(self.visibility.mode)

    @property
    def commune_id(self) -> str | None:
        if isinstance(self.visibility, LocalVisibility):
            return self.visibility.commune_id
        return None

    @property
    def audience_communes(self) -> tuple[str, ...]:
        if isinstance(self.visibility, CustomVisibility):
            return self.visibility.audience_communes
        return ()


ItemT = TypeVar("ItemT", bound=VisibilityItem)

# Flat wire keys owned by the visibility model
WIRE_VISIBILITY_KEYS = ("visibility", "communeId", "audienceCommunes")
WIRE_FIELD_NAMES: dict[str, str] = {
    "id": "id",
    "priority": "priority",
    "startAt": "start_at",
    "endAt": "end_at",
    "authorId": "author_id",
    "createdAt": "created_at",
}

# Model fields whose validation failures are visibility-shape violations
SHAPE_FIELDS = frozenset({"visibility", "start_at", "end_at"})


def _as_commune_list(value: Any) -> list[str]:
    if value is None or value == "":
        return []
    if isinstance(value, str):
        return [part for part in (p.strip() for p in value.split(",")) if part]
    if isinstance(value, (list, tuple)):
        return [str(part) for part in value if part is not None and str(part).strip()]
    raise InvalidVisibilityShapeError(
        "audience_not_a_list",
        details={"audienceCommunes": repr(value)},
    )


def visibility_from_wire(
    mode_value: Any,
    commune_value: Any = None,
    audience_value: Any = None,
) -> dict[str, Any]:
    """
    Convert the flat (visibility, communeId, audienceCommunes) triple to the union.

    Raises:
        InvalidVisibilityShapeError: If the tag is unknown or disagrees with the fields
    """
    mode = str(mode_value or "").strip().lower()
    commune_id = normalize_commune_id(commune_value)
    audience = _as_commune_list(audience_value)
    details = {
        "visibility": mode_value,
        "communeId": commune_value,
        "audienceCommunes": audience_value,
    }

    if mode == VisibilityMode.LOCAL:
        if audience:
            raise InvalidVisibilityShapeError("local_with_audience", details=details)
        return {"mode": "local", "commune_id": commune_id}

    if mode == VisibilityMode.GLOBAL:
        if commune_id or audience:
            raise InvalidVisibilityShapeError("global_with_target", details=details)
        return {"mode": "global"}

    if mode == VisibilityMode.CUSTOM:
        if commune_id:
            raise InvalidVisibilityShapeError("custom_with_commune", details=details)
        return {"mode": "custom", "audience_communes": audience}

    raise InvalidVisibilityShapeError("unknown_visibility", details=details)


def parse_visibility_item(
    payload: Mapping[str, Any],
    item_cls: type[ItemT] = VisibilityItem,  # type: ignore[assignment]
) -> ItemT:
    """
    Validate a flat wire payload and build a visibility-bearing item.

    Keys other than the visibility/window ones are passed through unchanged,
    so content models extending ``VisibilityItem`` parse their own fields.

    Raises:
        InvalidVisibilityShapeError: If the discriminated-union invariant is
            violated, the window is inverted or unreadable
        pydantic.ValidationError: If any other field fails validation
    """
    if "visibility" not in payload:
        raise InvalidVisibilityShapeError("visibility_missing", details={})

    data: dict[str, Any] = {
        key: value
        for key, value in payload.items()
        if key not in WIRE_VISIBILITY_KEYS and key not in WIRE_FIELD_NAMES
    }
    for wire_key, field_name in WIRE_FIELD_NAMES.items():
        if wire_key in payload and payload[wire_key] not in (None, ""):
            data[field_name] = payload[wire_key]

    data["visibility"] = visibility_from_wire(
        payload.get("visibility"),
        payload.get("communeId"),
        payload.get("audienceCommunes"),
    )

    try:
        return item_cls.model_validate(data)
    except ValidationError as exc:
        errors = exc.errors(include_url=False, include_context=False, include_input=False)
        shape_errors = [error for error in errors if error["loc"] and error["loc"][0] in SHAPE_FIELDS]
        if not shape_errors:
            # Plain field errors (title, priority, ...) are not shape violations
            raise
        raise InvalidVisibilityShapeError(
            "invalid_fields",
            details={"errors": shape_errors},
        ) from exc


def to_wire(item: VisibilityItem) -> dict[str, Any]:
    """Flat wire representation, the inverse of ``parse_visibility_item``."""
    return {
        "id": item.id,
        "visibility": item.mode.value,
        "communeId": item.commune_id or "",
        "audienceCommunes": list(item.audience_communes),
        "priority": item.priority.value,
        "startAt": item.start_at.isoformat() if item.start_at else None,
        "endAt": item.end_at.isoformat() if item.end_at else None,
        "authorId": item.author_id,
        "createdAt": item.created_at.isoformat() if item.created_at else None,
    }
