"""Answer Enforcement — tests for answer validation and session folding.

Tests cover:
    - Required blank answers rejected before mutation
    - Optional questions accept blank answers
    - Unknown question ids rejected
    - Select answers must match an option
    - Negative time rejected
    - Time accumulates, text overwrites, cursor advances only from the cursor
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from app.core.application_session import ApplicationSession
from app.core.enforce_answer import apply_answer, validate_answer
from app.core.errors import (
    AnswerValidationError, ApplicationClosedError, QuestionNotFoundError,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
TTL = timedelta(days=7)


@pytest.fixture
def session() -> ApplicationSession:
    return ApplicationSession(
        application_id=uuid.uuid4(), user_id="u1", position_id="pos",
        start_time=NOW, last_active_time=NOW, expires_at=NOW + TTL,
    )


def test_required_blank_answer_rejected(position, session):
    with pytest.raises(AnswerValidationError) as exc_info:
        apply_answer(session, position, "q1", "   ", 5, NOW, TTL)
    assert exc_info.value.field == "answer"
    assert session.answers == {}
    assert session.time_per_question == {}
    assert session.current_question == 0


def test_optional_blank_answer_accepted(position):
    assert validate_answer(position, "q3", "", 0).id == "q3"


def test_unknown_question_rejected(position, session):
    with pytest.raises(QuestionNotFoundError):
        apply_answer(session, position, "nope", "x", 1, NOW, TTL)
    assert session.answers == {}


def test_select_answer_must_be_an_option(position):
    with pytest.raises(AnswerValidationError):
        validate_answer(position, "q3", "Fax machine", 1)
    assert validate_answer(position, "q3", "Phone", 1).id == "q3"


def test_negative_time_rejected(position):
    with pytest.raises(AnswerValidationError) as exc_info:
        validate_answer(position, "q1", "Ada", -1)
    assert exc_info.value.field == "time_spent"


def test_save_advances_cursor_and_records(position, session):
    later = NOW + timedelta(seconds=30)
    apply_answer(session, position, "q1", "Ada", 30, later, TTL)
    assert session.answers == {"q1": "Ada"}
    assert session.time_per_question == {"q1": 30}
    assert session.current_question == 1
    assert session.expires_at == later + TTL


def test_resave_accumulates_time_and_overwrites_text(position, session):
    apply_answer(session, position, "q1", "Ada", 30, NOW, TTL)
    apply_answer(session, position, "q1", "Ada Lovelace", 20, NOW, TTL)
    assert session.answers["q1"] == "Ada Lovelace"
    assert session.time_per_question["q1"] == 50


def test_saving_earlier_question_keeps_cursor(position, session):
    session.current_question = 2
    apply_answer(session, position, "q1", "Ada", 3, NOW, TTL)
    assert session.current_question == 2


def test_terminal_session_rejects_answers(position, session):
    session.terminal = True
    with pytest.raises(ApplicationClosedError):
        apply_answer(session, position, "q1", "Ada", 3, NOW, TTL)
