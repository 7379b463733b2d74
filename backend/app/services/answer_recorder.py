"""Answer Recorder — validates and durably persists one answer plus accumulated time.

Invariants:
    - Validation runs before any write: a rejected answer changes neither DB nor session
    - The Response row is committed before the session store is updated, so a
      save is never lost to a later TTL expiry
    - Saving against a submitted application raises ApplicationClosedError
    - Returns the updated session snapshot (caller re-renders without a fetch)

Design Decisions:
    - Last write wins for concurrent saves of the same question: no version token
      (single active editor assumed)
    - The store lock for (user, position) is held from load to put, so two
      overlapping saves never drop each other's answers from the session
    - The stored session is a copy; mutation happens on that copy and is only
      put back after the commit succeeds
"""

import logging
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.application_session import ApplicationSession
from app.core.clock import Clock, utc_now
from app.core.domain_types import ApplicationStatus
from app.core.enforce_answer import apply_answer
from app.core.errors import ApplicationClosedError, ErrorContext, SessionExpiredError
from app.core.position import Position
from app.core.repository_protocols import PositionCatalog, SessionStore
from app.services.application_lookup import (
    find_application, load_live_session, resolve_position, upsert_response,
)

logger = logging.getLogger(__name__)


class AnswerRecorder:
    """Persists answers for a draft application."""

    def __init__(
        self,
        db: AsyncSession,
        store: SessionStore,
        catalog: PositionCatalog,
        ttl: timedelta,
        clock: Clock = utc_now,
    ):
        self.db = db
        self.store = store
        self.catalog = catalog
        self.ttl = ttl
        self.clock = clock

    async def save_answer(
        self,
        user_id: str,
        position_id: str,
        question_id: str,
        answer: str,
        time_spent: int,
    ) -> ApplicationSession:
        position = resolve_position(self.catalog, position_id, require_active=False)
        async with self.store.lock(user_id, position_id):
            return await self._save_locked(
                user_id, position, question_id, answer, time_spent,
            )

    async def _save_locked(
        self,
        user_id: str,
        position: Position,
        question_id: str,
        answer: str,
        time_spent: int,
    ) -> ApplicationSession:
        position_id = position.id
        session = await load_live_session(self.db, self.store, user_id, position_id)
        application = await find_application(self.db, session.application_id)
        if application is None:
            self.store.delete(user_id, position_id)
            raise SessionExpiredError(ErrorContext(position_id=position_id))
        if application.status != ApplicationStatus.DRAFT.value:
            session.terminal = True
            self.store.put(session)
            raise ApplicationClosedError(
                application.status,
                ErrorContext(
                    application_id=str(application.id), position_id=position_id,
                ),
            )

        now = self.clock()
        apply_answer(session, position, question_id, answer, time_spent, now, self.ttl)

        upsert_response(
            application,
            question_id,
            session.answers[question_id],
            session.time_per_question[question_id],
            now,
        )
        application.last_updated_at = now
        application.expires_at = session.expires_at
        await self.db.commit()

        self.store.put(session)
        logger.info(
            "Answer saved",
            extra={
                "application_id": session.application_id,
                "position_id": position_id,
                "question_id": question_id,
            },
        )
        return session
