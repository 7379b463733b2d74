"""Clock helpers — timezone-aware UTC time for the whole domain.

Invariants:
    - Every datetime handled by core/ is timezone-aware UTC
    - Naive datetimes coming back from the DB are interpreted as UTC

Design Decisions:
    - Services receive a clock callable instead of calling datetime.now() directly,
      so TTL and cooldown behaviour is testable without sleeping
"""

from collections.abc import Callable
from datetime import datetime, timezone

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime | None) -> datetime | None:
    """SQLite drops tzinfo on DateTime(timezone=True); reattach UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
