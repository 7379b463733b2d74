"""Submission Enforcement — tests for the completeness gate.

Tests cover:
    - Missing required ids reported in question order
    - Blank-after-strip counts as missing
    - Optional gaps never block
    - Terminal sessions cannot be submitted again
    - time_to_complete never negative
    - Response rows cover answered questions only
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from app.core.application_session import ApplicationSession
from app.core.enforce_submission import (
    build_response_rows, check_submittable, compute_time_to_complete,
    missing_required_questions,
)
from app.core.errors import ApplicationClosedError, IncompleteApplicationError

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _session(answers=None, times=None, terminal=False) -> ApplicationSession:
    return ApplicationSession(
        application_id=uuid.uuid4(), user_id="u1", position_id="pos",
        start_time=NOW, last_active_time=NOW, expires_at=NOW + timedelta(days=7),
        answers=answers or {}, time_per_question=times or {}, terminal=terminal,
    )


def test_missing_reported_in_question_order(position):
    assert missing_required_questions(position, {}) == ["q1", "q2"]


def test_blank_counts_as_missing(position):
    assert missing_required_questions(position, {"q1": " ", "q2": "ok"}) == ["q1"]


def test_incomplete_submit_raises_with_missing_ids(position):
    with pytest.raises(IncompleteApplicationError) as exc_info:
        check_submittable(_session({"q1": "Ada"}), position)
    assert exc_info.value.missing == ["q2"]
    assert exc_info.value.http_status == 400


def test_optional_gap_does_not_block(position):
    check_submittable(_session({"q1": "Ada", "q2": "Because"}), position)


def test_no_required_questions_always_submittable(optional_only_position):
    check_submittable(_session(), optional_only_position)


def test_terminal_session_cannot_submit(position):
    with pytest.raises(ApplicationClosedError):
        check_submittable(
            _session({"q1": "Ada", "q2": "Because"}, terminal=True), position,
        )


def test_time_to_complete_whole_seconds():
    assert compute_time_to_complete(NOW, NOW + timedelta(minutes=5, seconds=3.7)) == 303


def test_time_to_complete_never_negative():
    assert compute_time_to_complete(NOW, NOW - timedelta(seconds=10)) == 0


def test_response_rows_in_position_order(position):
    session = _session({"q3": "Phone", "q1": "Ada"}, {"q1": 12})
    rows = build_response_rows(session, position)
    assert [r["question_id"] for r in rows] == ["q1", "q3"]
    assert rows[0]["time_to_answer"] == 12
    assert rows[1]["time_to_answer"] == 0
