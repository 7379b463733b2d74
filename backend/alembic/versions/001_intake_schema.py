"""Intake schema — applications and responses.

Revision ID: 001_intake_schema
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_intake_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "applications",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("position_id", sa.String(64), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("last_updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("time_to_complete", sa.Integer, nullable=False, server_default="0"),
        sa.Column("reviewed_by", sa.String(64), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("feedback_note", sa.Text, nullable=False, server_default=""),
    )
    op.create_index("ix_applications_user_id", "applications", ["user_id"])
    op.create_index("ix_applications_position_id", "applications", ["position_id"])
    # One draft per (user, position); history rows are unconstrained
    op.create_index(
        "uq_applications_one_draft",
        "applications",
        ["user_id", "position_id"],
        unique=True,
        postgresql_where=sa.text("status = 'draft'"),
    )

    op.create_table(
        "responses",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "application_id", UUID(as_uuid=True),
            sa.ForeignKey("applications.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("question_id", sa.String(64), nullable=False),
        sa.Column("answer", sa.Text, nullable=False, server_default=""),
        sa.Column("time_to_answer", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint(
            "application_id", "question_id", name="uq_responses_application_question",
        ),
    )
    op.create_index("ix_responses_application_id", "responses", ["application_id"])


def downgrade() -> None:
    op.drop_index("ix_responses_application_id", table_name="responses")
    op.drop_table("responses")
    op.drop_index("uq_applications_one_draft", table_name="applications")
    op.drop_index("ix_applications_position_id", table_name="applications")
    op.drop_index("ix_applications_user_id", table_name="applications")
    op.drop_table("applications")
