"""Response ORM — one persisted answer to one question of an application.

Invariants:
    - Always belongs to an Application (application_id FK, ON DELETE CASCADE)
    - (application_id, question_id) is unique — saves upsert, never duplicate
    - time_to_answer is the accumulated seconds across all visits
    - Rows of a non-draft application are never updated again

Design Decisions:
    - Written on every save (not only at submit): a saved answer survives session expiry
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Response(Base):
    """Response entity — answer text plus time spent."""
    __tablename__ = "responses"
    __table_args__ = (
        UniqueConstraint(
            "application_id", "question_id",
            name="uq_responses_application_question",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    application_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    question_id: Mapped[str] = mapped_column(
        String(64), nullable=False,
    )
    answer: Mapped[str] = mapped_column(
        Text, nullable=False, default="",
    )
    time_to_answer: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
        onupdate=_utcnow,
    )

    application: Mapped["Application"] = relationship(
        "Application", back_populates="responses",
    )
