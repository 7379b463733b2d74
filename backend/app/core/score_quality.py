"""Answer Quality — advisory 0–3 effort heuristic for reviewers.

Invariants:
    - All functions are PURE: no IO, no side effects
    - Never consulted by submission; a low score never blocks anything
    - Unanswered (None or "") questions score 0 regardless of kind; a
      whitespace-only answer is still an answer and goes through the kind rules

Design Decisions:
    - long_text: < 30 words → 1, < 100 words → 2, < 1 s/word → 2 (suspiciously fast), else 3
    - short_text: > 10 characters → 2, else 1
    - select/checkbox: answered → 2
"""

from app.core.domain_types import InputType, QualityScore
from app.core.position import Position, Question


def score_answer(
    question: Question, answer: str | None, seconds_spent: int,
) -> QualityScore:
    if not answer:
        return QualityScore(0)

    if question.input_type == InputType.LONG_TEXT:
        word_count = len(answer.split())
        if word_count < 30:
            return QualityScore(1)
        if word_count < 100:
            return QualityScore(2)
        if seconds_spent / word_count < 1:
            return QualityScore(2)
        return QualityScore(3)

    if question.input_type == InputType.SHORT_TEXT:
        return QualityScore(2 if len(answer) > 10 else 1)

    return QualityScore(2)


def score_answers(
    position: Position,
    answers: dict[str, str],
    time_per_question: dict[str, int],
) -> dict[str, QualityScore]:
    """Score every question of the position, keyed by question id."""
    return {
        q.id: score_answer(q, answers.get(q.id), time_per_question.get(q.id, 0))
        for q in position.questions
    }
