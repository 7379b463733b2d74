"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - QualityScore and ProgressPercent wrap int with fixed ranges (0–3, 0–100)
    - All valid states encoded as Enums — no raw string matching
    - Status transitions only move forward (draft → submitted → in_review → approved | rejected)

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and compare equal to DB strings without converters
"""

from enum import Enum
from typing import NewType


# ─── Value Types ─────────────────────────────────────────────────

QualityScore = NewType("QualityScore", int)     # 0–3
ProgressPercent = NewType("ProgressPercent", int)  # 0–100


# ─── Enums ───────────────────────────────────────────────────────

class ApplicationStatus(str, Enum):
    """Application lifecycle states — maps to DB `status` column."""
    DRAFT = "draft"
    SUBMITTED = "submitted"
    IN_REVIEW = "in_review"
    APPROVED = "approved"
    REJECTED = "rejected"


class InputType(str, Enum):
    """Question input kinds."""
    SHORT_TEXT = "short_text"
    LONG_TEXT = "long_text"
    SELECT = "select"
    CHECKBOX = "checkbox"


class IntakeState(str, Enum):
    """Derived state of an application as seen by the candidate.

    DRAFTING and REVIEWING are both status=draft; the split is driven
    purely by the session cursor.
    """
    DRAFTING = "drafting"
    REVIEWING = "reviewing"
    SUBMITTED = "submitted"
    IN_REVIEW = "in_review"
    APPROVED = "approved"
    REJECTED = "rejected"


# A user holding one of these blocks a new start for the same position
BLOCKING_STATUSES = frozenset({
    ApplicationStatus.SUBMITTED,
    ApplicationStatus.IN_REVIEW,
    ApplicationStatus.APPROVED,
})
