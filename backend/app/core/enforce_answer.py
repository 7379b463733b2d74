"""Answer Enforcement — validates one answer and folds it into the session.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - Validation happens BEFORE mutation: a rejected answer leaves the session untouched
    - Required + blank-after-strip → AnswerValidationError
    - Unknown question id → QuestionNotFoundError (keeps answers ⊆ position question ids)
    - time_per_question accumulates, answer text overwrites

Design Decisions:
    - Raise typed errors (not error dicts): services translate nothing, the global
      handler maps IntakeError → HTTP envelope
    - Select answers must be one of the declared options; checkbox answers are free-form
      (their encoding belongs to the presentation layer)
"""

from datetime import datetime, timedelta

from app.core.application_session import ApplicationSession
from app.core.domain_types import ApplicationStatus, InputType
from app.core.errors import (
    AnswerValidationError, ApplicationClosedError, ErrorContext, QuestionNotFoundError,
)
from app.core.navigate_cursor import cursor_after_save
from app.core.position import Position, Question


def validate_answer(
    position: Position, question_id: str, answer: str, time_spent: int,
) -> Question:
    """Check one answer against its question. Returns the question on success."""
    ctx = ErrorContext(position_id=position.id, question_id=question_id)
    question = position.get_question(question_id)
    if question is None:
        raise QuestionNotFoundError(question_id, ctx)
    if time_spent < 0:
        raise AnswerValidationError(
            "Time spent cannot be negative", "time_spent", ctx,
        )
    if question.required and not answer.strip():
        raise AnswerValidationError(
            f"Question '{question.title}' is required", "answer", ctx,
        )
    if (
        question.input_type == InputType.SELECT
        and question.options
        and answer.strip()
        and answer not in question.options
    ):
        raise AnswerValidationError(
            f"Answer must be one of: {', '.join(question.options)}", "answer", ctx,
        )
    return question


def apply_answer(
    session: ApplicationSession,
    position: Position,
    question_id: str,
    answer: str,
    time_spent: int,
    now: datetime,
    ttl: timedelta,
) -> ApplicationSession:
    """Validate, then record answer + accumulated time and advance the cursor."""
    if session.terminal:
        raise ApplicationClosedError(ApplicationStatus.SUBMITTED.value)
    validate_answer(position, question_id, answer, time_spent)

    session.answers[question_id] = answer
    session.time_per_question[question_id] = (
        session.time_per_question.get(question_id, 0) + time_spent
    )
    session.current_question = cursor_after_save(session, position, question_id)
    session.touch(now, ttl)
    return session
