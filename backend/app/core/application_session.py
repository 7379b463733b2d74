"""Application Session — ephemeral per-visit working state over a durable draft.

Invariants:
    - answers keys ⊆ owning Position's question ids (enforced by enforce_answer)
    - time_per_question values only grow (accumulated across visits)
    - expires_at > last_active_time after every mutation
    - 0 <= current_question <= question count; == count means review state
    - terminal=True once submitted; no further mutation is accepted

Design Decisions:
    - Pure dataclass, no IO: the session store persists snapshots, not objects
    - to_snapshot()/from_snapshot() JSON-compatible: every store read yields an
      independent copy, so a failed operation never leaks partial mutations
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta


@dataclass
class ApplicationSession:
    """Per-visit navigation/progress state — pure dataclass, no IO."""

    application_id: uuid.UUID
    user_id: str
    position_id: str
    start_time: datetime
    last_active_time: datetime
    expires_at: datetime
    current_question: int = 0
    answers: dict[str, str] = field(default_factory=dict)
    time_per_question: dict[str, int] = field(default_factory=dict)
    terminal: bool = False

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def touch(self, now: datetime, ttl: timedelta) -> None:
        """Record activity and slide the expiry window. Pure state mutation."""
        self.last_active_time = now
        self.expires_at = now + ttl

    def to_snapshot(self) -> dict:
        return {
            "application_id": str(self.application_id),
            "user_id": self.user_id,
            "position_id": self.position_id,
            "current_question": self.current_question,
            "answers": dict(self.answers),
            "time_per_question": dict(self.time_per_question),
            "start_time": self.start_time.isoformat(),
            "last_active_time": self.last_active_time.isoformat(),
            "expires_at": self.expires_at.isoformat(),
            "terminal": self.terminal,
        }

    @classmethod
    def from_snapshot(cls, data: dict) -> "ApplicationSession":
        return cls(
            application_id=uuid.UUID(data["application_id"]),
            user_id=data["user_id"],
            position_id=data["position_id"],
            current_question=data.get("current_question", 0),
            answers=dict(data.get("answers", {})),
            time_per_question={
                k: int(v) for k, v in data.get("time_per_question", {}).items()
            },
            start_time=datetime.fromisoformat(data["start_time"]),
            last_active_time=datetime.fromisoformat(data["last_active_time"]),
            expires_at=datetime.fromisoformat(data["expires_at"]),
            terminal=data.get("terminal", False),
        )
