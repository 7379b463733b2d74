"""Progress — completion percentage over required questions. Pure, no IO."""

from app.core.domain_types import ProgressPercent
from app.core.position import Position


def compute_progress(answers: dict[str, str], position: Position) -> ProgressPercent:
    """round(100 * answered required / total required); 100 when nothing is required."""
    required = position.required_questions
    if not required:
        return ProgressPercent(100)
    answered = sum(1 for q in required if answers.get(q.id, "").strip())
    return ProgressPercent(round(100 * answered / len(required)))
