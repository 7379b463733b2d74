"""Static Position Catalog — built-in positions and their ordered questions.

Invariants:
    - Read-only: positions are frozen dataclasses, the catalog never mutates them
    - list_active() preserves declaration order and skips inactive positions

Design Decisions:
    - Positions defined in code (not DB): they change with releases, not at runtime
    - Any object with get()/list_active() can replace this (PositionCatalog protocol)
"""

from app.core.domain_types import InputType
from app.core.position import Position, Question

_DEVICE_OPTIONS = ("Computer", "Smartphone", "Tablet", "Multiple devices")

DEFAULT_POSITIONS: tuple[Position, ...] = (
    Position(
        id="moderator",
        title="Community Moderator",
        description=(
            "Help maintain a healthy community by enforcing rules and assisting users."
        ),
        active=True,
        questions=(
            Question("mod_exp", "Previous Experience", InputType.LONG_TEXT, True,
                     "Tell us about your experience as a moderator in other communities",
                     sort_order=1),
            Question("mod_age", "Age", InputType.SHORT_TEXT, True,
                     "How old are you?", sort_order=2),
            Question("mod_device", "Device", InputType.SELECT, True,
                     "Which device do you primarily use?", _DEVICE_OPTIONS, 3),
            Question("mod_scenario", "Scenario Question", InputType.LONG_TEXT, True,
                     "How would you handle a situation where two users are having "
                     "a heated argument?", sort_order=4),
            Question("mod_time", "Availability", InputType.SHORT_TEXT, True,
                     "How many hours per week can you dedicate to moderation?",
                     sort_order=5),
            Question("mod_timezone", "Timezone", InputType.SHORT_TEXT, True,
                     "What is your timezone?", sort_order=6),
            Question("mod_rules", "Rules Understanding", InputType.LONG_TEXT, True,
                     "Why are community guidelines important?", sort_order=7),
            Question("mod_why", "Why Us?", InputType.LONG_TEXT, True,
                     "Why do you want to moderate for our community?", sort_order=8),
            Question("mod_challenges", "Biggest Challenge", InputType.LONG_TEXT, True,
                     "What do you think is the biggest challenge in moderating "
                     "an online community?", sort_order=9),
            Question("mod_style", "Moderation Style", InputType.LONG_TEXT, True,
                     "How would you describe your moderation style?", sort_order=10),
            Question("mod_language", "Languages", InputType.SHORT_TEXT, True,
                     "Which languages do you speak?", sort_order=11),
            Question("mod_availability_detail", "Availability Details",
                     InputType.LONG_TEXT, False,
                     "Are there specific days or times you're most available?",
                     sort_order=12),
            Question("mod_final", "Anything Else?", InputType.LONG_TEXT, False,
                     "Is there anything else you'd like us to know?", sort_order=13),
        ),
    ),
    Position(
        id="concept_creator",
        title="Concept Creator",
        description=(
            "Develop creative and innovative concepts for new features "
            "or community events."
        ),
        active=True,
        questions=(
            Question("concept_exp", "Creative Experience", InputType.LONG_TEXT, True,
                     "Tell us about your background in creative work or concept "
                     "development", sort_order=1),
            Question("concept_age", "Age", InputType.SHORT_TEXT, True,
                     "How old are you?", sort_order=2),
            Question("concept_device", "Device", InputType.SELECT, True,
                     "Which device do you primarily use?", _DEVICE_OPTIONS, 3),
            Question("concept_example", "Your Best Concept", InputType.LONG_TEXT, True,
                     "Describe a concept or idea you've developed that you're proud of",
                     sort_order=4),
            Question("concept_collab", "Collaboration", InputType.LONG_TEXT, True,
                     "How do you usually collaborate with others on ideas?",
                     sort_order=5),
            Question("concept_timezone", "Timezone", InputType.SHORT_TEXT, True,
                     "What is your timezone?", sort_order=6),
            Question("concept_feedback", "Handling Feedback", InputType.LONG_TEXT, True,
                     "How do you handle criticism or feedback on your ideas?",
                     sort_order=7),
            Question("concept_tools", "Tools", InputType.SHORT_TEXT, False,
                     "What tools do you use to visualize or present your ideas?",
                     sort_order=8),
            Question("concept_pitch", "Idea Pitch", InputType.LONG_TEXT, True,
                     "Pitch us a concept idea in a few sentences", sort_order=9),
            Question("concept_why", "Why This Role?", InputType.LONG_TEXT, True,
                     "Why do you want to be a concept creator with us?", sort_order=10),
            Question("concept_language", "Languages", InputType.SHORT_TEXT, True,
                     "Which languages do you speak?", sort_order=11),
            Question("concept_final", "Anything Else?", InputType.LONG_TEXT, False,
                     "Is there anything else you'd like us to know?", sort_order=12),
        ),
    ),
)


class StaticPositionCatalog:
    """PositionCatalog over a fixed tuple of positions."""

    def __init__(self, positions: tuple[Position, ...] = DEFAULT_POSITIONS):
        self._positions = {p.id: p for p in positions}

    def get(self, position_id: str) -> Position | None:
        return self._positions.get(position_id)

    def list_active(self) -> list[Position]:
        return [p for p in self._positions.values() if p.active]
