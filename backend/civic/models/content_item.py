import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, String, Text, func
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class ContentItemRecord(Base):
    __tablename__ = "content_items"
    __table_args__ = (
        CheckConstraint(
            "kind IN ('incidents', 'notifications', 'infos', 'projects', 'articles')",
            name="ck_content_items_kind",
        ),
        CheckConstraint(
            "priority IN ('normal', 'pinned', 'urgent')",
            name="ck_content_items_priority",
        ),
        # Discriminated union: exactly the fields of the visibility tag are set
        CheckConstraint(
            "(visibility = 'local' AND commune_id IS NOT NULL AND commune_id <> '' "
            "AND (audience_communes IS NULL OR cardinality(audience_communes) = 0))"
            " OR (visibility = 'global' AND commune_id IS NULL "
            "AND (audience_communes IS NULL OR cardinality(audience_communes) = 0))"
            " OR (visibility = 'custom' AND commune_id IS NULL "
            "AND cardinality(audience_communes) > 0)",
            name="ck_content_items_visibility_shape",
        ),
        CheckConstraint(
            "start_at IS NULL OR end_at IS NULL OR start_at <= end_at",
            name="ck_content_items_window",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    kind: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    category: Mapped[str | None] = mapped_column(String(64))
    visibility: Mapped[str] = mapped_column(String(16), nullable=False)
    commune_id: Mapped[str | None] = mapped_column(String(100), index=True)
    audience_communes: Mapped[list[str] | None] = mapped_column(ARRAY(String(100)))
    priority: Mapped[str] = mapped_column(
        String(16), nullable=False, server_default="normal"
    )
    start_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    end_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    author_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
