"""Root conftest — shared test configuration and catalog fixtures."""

import os

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")

from app.core.domain_types import InputType  # noqa: E402
from app.core.position import Position, Question  # noqa: E402


def _make_position(
    position_id: str = "pos",
    active: bool = True,
    questions: tuple[Question, ...] | None = None,
) -> Position:
    """Two required questions (short + long) plus one optional select."""
    if questions is None:
        questions = (
            Question("q1", "Name", InputType.SHORT_TEXT, True, sort_order=1),
            Question("q2", "Motivation", InputType.LONG_TEXT, True, sort_order=2),
            Question(
                "q3", "Device", InputType.SELECT, False,
                options=("Computer", "Phone"), sort_order=3,
            ),
        )
    return Position(
        id=position_id, title=f"Position {position_id}", active=active,
        questions=questions,
    )


@pytest.fixture
def make_position():
    """Factory for ad-hoc positions (inactive, custom questions)."""
    return _make_position


@pytest.fixture
def position() -> Position:
    return _make_position()


@pytest.fixture
def optional_only_position() -> Position:
    return _make_position(
        "optional",
        questions=(Question("o1", "Notes", InputType.LONG_TEXT, False),),
    )
