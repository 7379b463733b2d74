"""Application ORM — durable record of one candidate's attempt at a position.

Invariants:
    - id is UUID primary key
    - status moves forward only: draft -> submitted -> in_review -> approved | rejected
    - At most one draft per (user_id, position_id) — partial unique index
    - submitted_at set exactly once, at submission
    - expires_at slides with every saved answer while the application is a draft

Design Decisions:
    - position_id is a plain string: positions live in the catalog, not in this DB
    - Partial unique index on drafts only: submitted/reviewed rows are history and
      may coexist with a later draft once a rejection cooldown has passed
    - cascade delete for responses: the application owns its answers
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Application(Base):
    """Application aggregate root — owns all Responses."""
    __tablename__ = "applications"
    __table_args__ = (
        Index(
            "uq_applications_one_draft",
            "user_id", "position_id",
            unique=True,
            postgresql_where=text("status = 'draft'"),
            sqlite_where=text("status = 'draft'"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[str] = mapped_column(
        String(64), nullable=False, index=True,
    )
    position_id: Mapped[str] = mapped_column(
        String(64), nullable=False, index=True,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="draft",
    )
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    last_updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    submitted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    time_to_complete: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    reviewed_by: Mapped[str | None] = mapped_column(
        String(64), nullable=True,
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    feedback_note: Mapped[str] = mapped_column(
        Text, nullable=False, default="",
    )

    responses: Mapped[list["Response"]] = relationship(
        "Response", back_populates="application",
        cascade="all, delete-orphan", lazy="selectin",
    )
