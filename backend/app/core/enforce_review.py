"""Review Enforcement — post-submission status edges and re-application cooldown.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - Status only moves forward: submitted → in_review → approved | rejected
      (submitted may jump straight to a decision); no edge leaves a decision
    - Cooldown counts whole days remaining, rounded up (+1 past the floor)
"""

from datetime import datetime, timedelta

from app.core.domain_types import ApplicationStatus
from app.core.errors import InvalidStatusTransitionError, ErrorContext

ALLOWED_REVIEW_TRANSITIONS: dict[ApplicationStatus, frozenset[ApplicationStatus]] = {
    ApplicationStatus.SUBMITTED: frozenset({
        ApplicationStatus.IN_REVIEW,
        ApplicationStatus.APPROVED,
        ApplicationStatus.REJECTED,
    }),
    ApplicationStatus.IN_REVIEW: frozenset({
        ApplicationStatus.APPROVED,
        ApplicationStatus.REJECTED,
    }),
}


def check_review_transition(
    current: str, target: str, context: ErrorContext | None = None,
) -> None:
    allowed = ALLOWED_REVIEW_TRANSITIONS.get(ApplicationStatus(current), frozenset())
    if ApplicationStatus(target) not in allowed:
        raise InvalidStatusTransitionError(current, target, context)


def cooldown_days_left(
    reviewed_at: datetime | None, now: datetime, cooldown_days: int,
) -> int | None:
    """Days left before a rejected candidate may re-apply; None when clear."""
    if reviewed_at is None:
        return None
    cooldown_ends = reviewed_at + timedelta(days=cooldown_days)
    if cooldown_ends <= now:
        return None
    remaining_hours = (cooldown_ends - now).total_seconds() / 3600
    return int(remaining_hours // 24) + 1
