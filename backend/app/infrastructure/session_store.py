"""In-Memory Session Store — ephemeral cursor/timer state keyed by (user, position).

Invariants:
    - Stores JSON-compatible snapshots; every get() returns an independent copy
    - An entry past its expires_at is never returned (get() evicts it lazily)
    - Losing an entry loses only cursor/timer state — answers live in the DB

Design Decisions:
    - In-process dict: single-process uvicorn; sessions are rebuildable from the DB
      on the next start, so losing them on restart is acceptable
    - Constructed in the lifespan and injected, never a module-level instance
    - Clock injected so expiry is testable without sleeping
    - lock() hands out one asyncio.Lock per key; services hold it across
      load → apply → commit → put so overlapping requests serialize
"""

import asyncio
import logging
from datetime import datetime

from app.core.application_session import ApplicationSession
from app.core.clock import Clock, utc_now

logger = logging.getLogger(__name__)


class InMemorySessionStore:
    """SessionStore implementation backed by a plain dict."""

    def __init__(self, clock: Clock = utc_now):
        self._clock = clock
        self._entries: dict[tuple[str, str], dict] = {}
        self._locks: dict[tuple[str, str], asyncio.Lock] = {}

    def get(self, user_id: str, position_id: str) -> ApplicationSession | None:
        snapshot = self._entries.get((user_id, position_id))
        if snapshot is None:
            return None
        session = ApplicationSession.from_snapshot(snapshot)
        if session.is_expired(self._clock()):
            self._entries.pop((user_id, position_id), None)
            logger.info(
                "Evicted expired session",
                extra={"user_id": user_id, "position_id": position_id},
            )
            return None
        return session

    def put(self, session: ApplicationSession) -> None:
        self._entries[(session.user_id, session.position_id)] = session.to_snapshot()

    def delete(self, user_id: str, position_id: str) -> None:
        self._entries.pop((user_id, position_id), None)

    def lock(self, user_id: str, position_id: str) -> asyncio.Lock:
        """Lock guarding read-modify-write of one (user, position) session."""
        return self._locks.setdefault((user_id, position_id), asyncio.Lock())

    def purge_expired(self, now: datetime) -> int:
        """Drop every expired entry. Returns how many were removed."""
        expired = [
            key for key, snapshot in self._entries.items()
            if ApplicationSession.from_snapshot(snapshot).is_expired(now)
        ]
        for key in expired:
            del self._entries[key]
            lock = self._locks.get(key)
            if lock is not None and not lock.locked():
                del self._locks[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)
