"""Application Schemas — Pydantic models for the candidate and moderation endpoints.

Invariants:
    - time_spent is non-negative at the boundary; cursor bounds are a domain rule
    - ReviewRequest.status is a decision status; rejection requires a feedback note
    - SessionView carries the session plus derived progress, state and quality

Design Decisions:
    - Answer text is not stripped here: blank-after-strip is a domain rule
      (required questions only), enforced in app.core.enforce_answer
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator


class StartRequest(BaseModel):
    position_id: str = Field(min_length=1, max_length=64)


class SubmitRequest(BaseModel):
    position_id: str = Field(min_length=1, max_length=64)


class SaveAnswerRequest(BaseModel):
    """One answer for one question, with seconds spent since the last save."""
    position_id: str = Field(min_length=1, max_length=64)
    question_id: str = Field(min_length=1, max_length=64)
    answer: str = Field(max_length=10_000)
    time_spent: int = Field(0, ge=0)


class NavigateRequest(BaseModel):
    position_id: str = Field(min_length=1, max_length=64)
    index: int  # bounds checked by check_cursor_in_range()


class SessionView(BaseModel):
    """Session snapshot as rendered by the candidate UI."""
    application_id: UUID
    user_id: str
    position_id: str
    current_question: int
    answers: dict[str, str]
    time_per_question: dict[str, int]
    start_time: datetime
    last_active_time: datetime
    expires_at: datetime
    progress: int
    state: str
    quality: dict[str, int]


class SubmitResponse(BaseModel):
    id: UUID
    position_id: str
    status: str
    submitted_at: datetime | None
    time_to_complete: int


class ApplicationSummary(BaseModel):
    id: UUID
    user_id: str
    position_id: str
    position_title: str | None = None
    position_description: str | None = None
    status: str
    state: str
    started_at: datetime
    submitted_at: datetime | None = None
    time_to_complete: int = 0
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    feedback_note: str = ""


class ResponseDetail(BaseModel):
    question_id: str
    question_title: str | None = None
    question_subtitle: str | None = None
    answer: str
    time_to_answer: int
    quality: int | None = None


class ApplicationDetail(ApplicationSummary):
    responses: list[ResponseDetail] = []


class ReviewRequest(BaseModel):
    """Staff decision on a submitted application."""
    status: Literal["in_review", "approved", "rejected"]
    feedback_note: str = Field("", max_length=5000)

    @field_validator("feedback_note")
    @classmethod
    def strip_note(cls, v: str) -> str:
        return v.strip()

    @model_validator(mode="after")
    def validate_feedback(self):
        if self.status == "rejected" and not self.feedback_note:
            raise ValueError("rejected status requires feedback_note")
        return self
