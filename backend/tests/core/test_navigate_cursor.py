"""Cursor Navigation — tests for pure cursor movement and state derivation.

Tests cover:
    - first_unanswered_index skips answered ids, returns count when complete
    - cursor_after_save advances only from the cursor question
    - move_to bounds [0, count], slides expiry, refuses terminal sessions
    - derive_intake_state: drafting / reviewing / submitted
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from app.core.application_session import ApplicationSession
from app.core.domain_types import ApplicationStatus, IntakeState
from app.core.errors import ApplicationClosedError, CursorOutOfRangeError
from app.core.navigate_cursor import (
    cursor_after_save, derive_intake_state, first_unanswered_index,
    intake_state_for_status, move_to,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
TTL = timedelta(days=7)


def _session(**overrides) -> ApplicationSession:
    data = dict(
        application_id=uuid.uuid4(), user_id="u1", position_id="pos",
        start_time=NOW, last_active_time=NOW, expires_at=NOW + TTL,
    )
    data.update(overrides)
    return ApplicationSession(**data)


# ─── first_unanswered_index ──────────────────────────────────────

def test_first_unanswered_is_zero_for_empty(position):
    assert first_unanswered_index(position, {}) == 0


def test_first_unanswered_skips_answered(position):
    assert first_unanswered_index(position, {"q1": "a"}) == 1


def test_first_unanswered_finds_gap(position):
    assert first_unanswered_index(position, {"q1": "a", "q3": "Phone"}) == 1


def test_first_unanswered_returns_count_when_complete(position):
    answers = {"q1": "a", "q2": "b", "q3": "Phone"}
    assert first_unanswered_index(position, answers) == position.question_count


# ─── cursor_after_save ───────────────────────────────────────────

def test_saving_cursor_question_advances(position):
    session = _session(current_question=1)
    assert cursor_after_save(session, position, "q2") == 2


def test_saving_other_question_keeps_cursor(position):
    session = _session(current_question=2)
    assert cursor_after_save(session, position, "q1") == 2


def test_saving_last_question_enters_review(position):
    session = _session(current_question=2)
    assert cursor_after_save(session, position, "q3") == 3


# ─── move_to ─────────────────────────────────────────────────────

def test_move_to_any_index_in_range(position):
    session = _session(current_question=2)
    later = NOW + timedelta(minutes=5)
    move_to(session, position, 0, later, TTL)
    assert session.current_question == 0
    assert session.last_active_time == later
    assert session.expires_at == later + TTL


def test_move_to_count_is_review(position):
    session = _session()
    move_to(session, position, position.question_count, NOW, TTL)
    assert derive_intake_state(session, position) == IntakeState.REVIEWING


@pytest.mark.parametrize("index", [-1, 4, 100])
def test_move_to_out_of_range_raises(position, index):
    session = _session(current_question=1)
    with pytest.raises(CursorOutOfRangeError):
        move_to(session, position, index, NOW, TTL)
    assert session.current_question == 1


def test_move_to_terminal_session_raises(position):
    session = _session(terminal=True)
    with pytest.raises(ApplicationClosedError):
        move_to(session, position, 0, NOW, TTL)


# ─── states ──────────────────────────────────────────────────────

def test_derive_state_drafting_then_submitted(position):
    session = _session(current_question=1)
    assert derive_intake_state(session, position) == IntakeState.DRAFTING
    session.terminal = True
    assert derive_intake_state(session, position) == IntakeState.SUBMITTED


def test_intake_state_for_status():
    assert intake_state_for_status(ApplicationStatus.DRAFT.value) == IntakeState.DRAFTING
    assert intake_state_for_status("approved") == IntakeState.APPROVED
