"""Application Session — snapshot round trip and expiry."""

import uuid
from datetime import datetime, timedelta, timezone

from app.core.application_session import ApplicationSession

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _session() -> ApplicationSession:
    return ApplicationSession(
        application_id=uuid.uuid4(), user_id="u1", position_id="pos",
        start_time=NOW, last_active_time=NOW, expires_at=NOW + timedelta(hours=1),
        current_question=2, answers={"q1": "Ada"}, time_per_question={"q1": 9},
    )


def test_snapshot_restores_equal_session():
    session = _session()
    restored = ApplicationSession.from_snapshot(session.to_snapshot())
    assert restored == session
    assert restored.expires_at.tzinfo is not None


def test_snapshot_is_independent_copy():
    session = _session()
    snapshot = session.to_snapshot()
    session.answers["q2"] = "later"
    assert "q2" not in snapshot["answers"]


def test_expiry_boundary_is_inclusive():
    session = _session()
    assert not session.is_expired(NOW + timedelta(minutes=59))
    assert session.is_expired(NOW + timedelta(hours=1))


def test_touch_slides_expiry():
    session = _session()
    later = NOW + timedelta(minutes=30)
    session.touch(later, timedelta(hours=1))
    assert session.last_active_time == later
    assert session.expires_at == later + timedelta(hours=1)
