"""Cursor Navigation — movement rules shared by start, save, navigate and submit.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - Cursor is always within [0, question count]; count is the review state
    - Navigation is free before submission: any index, any order, no forward-only rule
    - A terminal session never moves

Design Decisions:
    - Resume cursor derived from answers, not stored: repeated start calls converge
      on the same cursor no matter how often they happen
    - Drafting → Reviewing is implicit (cursor == count), never a separate call
"""

from datetime import datetime, timedelta

from app.core.application_session import ApplicationSession
from app.core.domain_types import ApplicationStatus, IntakeState
from app.core.errors import ApplicationClosedError, CursorOutOfRangeError
from app.core.position import Position


def first_unanswered_index(position: Position, answers: dict[str, str]) -> int:
    """First question id absent from answers; question count when all present."""
    for index, question in enumerate(position.questions):
        if question.id not in answers:
            return index
    return position.question_count


def check_cursor_in_range(index: int, position: Position) -> None:
    if index < 0 or index > position.question_count:
        raise CursorOutOfRangeError(index, position.question_count)


def cursor_after_save(
    session: ApplicationSession, position: Position, question_id: str,
) -> int:
    """Advance only when the saved question is the one under the cursor."""
    saved_index = position.index_of(question_id)
    if saved_index is not None and saved_index == session.current_question:
        return min(saved_index + 1, position.question_count)
    return session.current_question


def move_to(
    session: ApplicationSession,
    position: Position,
    index: int,
    now: datetime,
    ttl: timedelta,
) -> ApplicationSession:
    """Move the cursor. Pure state mutation on the given session."""
    if session.terminal:
        raise ApplicationClosedError(ApplicationStatus.SUBMITTED.value)
    check_cursor_in_range(index, position)
    session.current_question = index
    session.touch(now, ttl)
    return session


def is_reviewing(session: ApplicationSession, position: Position) -> bool:
    return session.current_question >= position.question_count


def derive_intake_state(
    session: ApplicationSession, position: Position,
) -> IntakeState:
    if session.terminal:
        return IntakeState.SUBMITTED
    if is_reviewing(session, position):
        return IntakeState.REVIEWING
    return IntakeState.DRAFTING


def intake_state_for_status(status: str) -> IntakeState:
    """Map a persisted status onto the candidate-facing state (drafts → drafting)."""
    if status == ApplicationStatus.DRAFT:
        return IntakeState.DRAFTING
    return IntakeState(status)
