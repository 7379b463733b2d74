"""Position & Question — read-only catalog value objects.

Invariants:
    - Position and Question are frozen: immutable for the lifetime of a session
    - Position.questions is ordered by sort_order (ties keep declaration order)
    - Question ids are unique within a position

Design Decisions:
    - Frozen dataclasses over ORM rows: the catalog is owned elsewhere, core only reads it
    - Lookup helpers live here so navigation, validation and scoring share one index
"""

from dataclasses import dataclass, field

from app.core.domain_types import InputType


@dataclass(frozen=True)
class Question:
    id: str
    title: str
    input_type: InputType
    required: bool = False
    subtitle: str = ""
    options: tuple[str, ...] = ()
    sort_order: int = 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "subtitle": self.subtitle,
            "input_type": self.input_type.value,
            "required": self.required,
            "options": list(self.options),
            "sort_order": self.sort_order,
        }


@dataclass(frozen=True)
class Position:
    id: str
    title: str
    description: str = ""
    active: bool = True
    questions: tuple[Question, ...] = field(default_factory=tuple)

    def __post_init__(self):
        ordered = tuple(sorted(self.questions, key=lambda q: q.sort_order))
        object.__setattr__(self, "questions", ordered)
        ids = [q.id for q in ordered]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate question ids in position '{self.id}'")

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def question_ids(self) -> list[str]:
        return [q.id for q in self.questions]

    @property
    def required_questions(self) -> list[Question]:
        return [q for q in self.questions if q.required]

    def get_question(self, question_id: str) -> Question | None:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def index_of(self, question_id: str) -> int | None:
        for index, question in enumerate(self.questions):
            if question.id == question_id:
                return index
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "active": self.active,
            "question_count": self.question_count,
            "questions": [q.to_dict() for q in self.questions],
        }
