"""Submission Validator — completeness gate and the terminal draft → submitted transition.

Invariants:
    - Incomplete submit raises IncompleteApplicationError; status stays draft, nothing written
    - Successful submit copies every answer/time into Response rows, sets status=submitted,
      submitted_at=now, time_to_complete=now - start_time, and marks the session terminal
    - Any later save/navigate against the application raises ApplicationClosedError
    - Quality scores are never consulted

Design Decisions:
    - Submit does not require a live session: answers are durable, so an expired
      session is rebuilt from the DB instead of forcing the caller through start
    - Completeness is checked against the committed Response rows; the cached
      session only supplies the start time
"""

import logging
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.application_session import ApplicationSession
from app.core.clock import Clock, utc_now
from app.core.domain_types import ApplicationStatus
from app.core.enforce_submission import (
    build_response_rows, check_submittable, compute_time_to_complete,
)
from app.core.errors import (
    ApplicationClosedError, ErrorContext, ResourceNotFoundError,
)
from app.core.position import Position
from app.core.repository_protocols import PositionCatalog, SessionStore
from app.models.application import Application
from app.services.application_lookup import (
    find_application, find_draft, find_latest_closed, resolve_position,
    saved_answers, session_from_application, upsert_response,
)

logger = logging.getLogger(__name__)


class SubmissionValidator:
    """Finalizes draft applications."""

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

    async def submit(self, user_id: str, position_id: str) -> Application:
        position = resolve_position(self.catalog, position_id, require_active=False)
        async with self.store.lock(user_id, position_id):
            return await self._submit_locked(user_id, position)

    async def _submit_locked(self, user_id: str, position: Position) -> Application:
        position_id = position.id
        now = self.clock()
        application, session = await self._resolve_draft(user_id, position, now)
        # Committed rows are the record of what was answered, not the cached copy
        session.answers, session.time_per_question = saved_answers(application)

        check_submittable(session, position)

        for row in build_response_rows(session, position):
            upsert_response(
                application, row["question_id"], row["answer"],
                row["time_to_answer"], now,
            )
        application.status = ApplicationStatus.SUBMITTED.value
        application.submitted_at = now
        application.last_updated_at = now
        application.time_to_complete = compute_time_to_complete(session.start_time, now)
        await self.db.commit()

        session.terminal = True
        session.touch(now, self.ttl)
        self.store.put(session)
        logger.info(
            "Application submitted",
            extra={
                "application_id": application.id,
                "position_id": position_id,
                "user_id": user_id,
            },
        )
        return application

    async def _resolve_draft(
        self, user_id: str, position: Position, now: datetime,
    ) -> tuple[Application, ApplicationSession]:
        """Draft application plus its working session (live or rebuilt)."""
        position_id = position.id
        ctx = ErrorContext(position_id=position_id)
        session = self.store.get(user_id, position_id)

        if session is not None:
            ctx.application_id = str(session.application_id)
            if session.terminal:
                raise ApplicationClosedError(ApplicationStatus.SUBMITTED.value, ctx)
            application = await find_application(self.db, session.application_id)
            if application is not None:
                if application.status != ApplicationStatus.DRAFT.value:
                    raise ApplicationClosedError(application.status, ctx)
                return application, session
            self.store.delete(user_id, position_id)

        draft = await find_draft(self.db, user_id, position_id)
        if draft is None:
            closed = await find_latest_closed(self.db, user_id, position_id)
            if closed is not None:
                ctx.application_id = str(closed.id)
                raise ApplicationClosedError(closed.status, ctx)
            raise ResourceNotFoundError("Application", position_id, ctx)
        logger.info(
            "Rebuilding session for submit",
            extra={"application_id": draft.id, "position_id": position_id},
        )
        return draft, session_from_application(draft, position, now, self.ttl)
