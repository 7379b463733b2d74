"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Collaborators (catalog, session store) accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Catalog and store are synchronous: both are in-process lookups; durable
      Application/Response persistence stays in the async service layer
"""

import asyncio
from datetime import datetime
from typing import Protocol

from app.core.application_session import ApplicationSession
from app.core.position import Position


class PositionCatalog(Protocol):
    """Read-only source of positions and their ordered questions."""
    def get(self, position_id: str) -> Position | None: ...
    def list_active(self) -> list[Position]: ...


class SessionStore(Protocol):
    """Ephemeral session storage keyed by (user_id, position_id)."""
    def get(self, user_id: str, position_id: str) -> ApplicationSession | None: ...
    def put(self, session: ApplicationSession) -> None: ...
    def delete(self, user_id: str, position_id: str) -> None: ...
    def lock(self, user_id: str, position_id: str) -> asyncio.Lock: ...
    def purge_expired(self, now: datetime) -> int: ...
