"""Position Schemas — read-only catalog views."""

from pydantic import BaseModel


class QuestionView(BaseModel):
    id: str
    title: str
    subtitle: str = ""
    input_type: str
    required: bool
    options: list[str] = []
    sort_order: int = 0


class PositionSummary(BaseModel):
    id: str
    title: str
    description: str = ""
    active: bool
    question_count: int


class PositionView(PositionSummary):
    questions: list[QuestionView]
