"""Submission Enforcement — completeness gate and finalization payload.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - missing ids are reported in the position's question order
    - A required question counts as missing when absent OR blank after strip
    - Quality scores are never consulted here
    - time_to_complete = now - start_time, in whole seconds, never negative

Design Decisions:
    - check_submittable raises before anything is written: a blocked submit leaves
      status at draft and the session untouched
"""

from datetime import datetime

from app.core.application_session import ApplicationSession
from app.core.domain_types import ApplicationStatus
from app.core.errors import (
    ApplicationClosedError, ErrorContext, IncompleteApplicationError,
)
from app.core.position import Position


def missing_required_questions(
    position: Position, answers: dict[str, str],
) -> list[str]:
    return [
        q.id for q in position.required_questions
        if not answers.get(q.id, "").strip()
    ]


def check_submittable(session: ApplicationSession, position: Position) -> None:
    """Raise if the session cannot be finalized."""
    ctx = ErrorContext(
        application_id=str(session.application_id), position_id=position.id,
    )
    if session.terminal:
        raise ApplicationClosedError(ApplicationStatus.SUBMITTED.value, ctx)
    missing = missing_required_questions(position, session.answers)
    if missing:
        raise IncompleteApplicationError(missing, ctx)


def compute_time_to_complete(start_time: datetime, now: datetime) -> int:
    return max(0, int((now - start_time).total_seconds()))


def build_response_rows(
    session: ApplicationSession, position: Position,
) -> list[dict]:
    """Every answered question as a response row, in position order."""
    rows = []
    for question in position.questions:
        if question.id not in session.answers:
            continue
        rows.append({
            "question_id": question.id,
            "answer": session.answers[question.id],
            "time_to_answer": session.time_per_question.get(question.id, 0),
        })
    return rows
