"""Session Manager — start/resume, navigation, and the single entry point for intake operations.

Invariants:
    - At most one draft per (user, position): start resumes it, never duplicates it
    - start is idempotent: repeated calls return the same application_id and keep answers
    - A live session is returned unchanged; a lost/expired one is rebuilt from the DB
      with the cursor at the first unanswered question
    - submitted / in_review / approved application → AlreadyActiveApplicationError
    - rejection younger than the cooldown → RejectionCooldownError
    - A cached session pointing at a different draft than the DB resolves is dropped
      and surfaced as AlreadyActiveApplicationError (never silently overwritten)

Design Decisions:
    - Manager owns the collaborators and delegates saves/submits to AnswerRecorder and
      SubmissionValidator so each concern stays testable on its own
    - Draft-insert races are caught via the partial unique index (IntegrityError)
      and surfaced as AlreadyActiveApplicationError
    - Every mutation runs under the store lock for its (user, position)
"""

import logging
from datetime import datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.application_session import ApplicationSession
from app.core.clock import Clock, ensure_utc, utc_now
from app.core.compute_progress import compute_progress
from app.core.domain_types import ApplicationStatus
from app.core.enforce_review import cooldown_days_left
from app.core.errors import (
    AlreadyActiveApplicationError, ErrorContext, RejectionCooldownError,
)
from app.core.navigate_cursor import derive_intake_state, move_to
from app.core.position import Position
from app.core.repository_protocols import PositionCatalog, SessionStore
from app.core.score_quality import score_answers
from app.models.application import Application
from app.services.answer_recorder import AnswerRecorder
from app.services.application_lookup import (
    find_blocking, find_draft, find_latest_rejected, load_live_session,
    resolve_position, session_from_application,
)
from app.services.submission_validator import SubmissionValidator

logger = logging.getLogger(__name__)


class SessionManager:
    """Cohesive intake API: start, save_answer, move_to, submit, view."""

    def __init__(
        self,
        db: AsyncSession,
        store: SessionStore,
        catalog: PositionCatalog,
        ttl: timedelta,
        rejection_cooldown_days: int = 7,
        clock: Clock = utc_now,
    ):
        self.db = db
        self.store = store
        self.catalog = catalog
        self.ttl = ttl
        self.rejection_cooldown_days = rejection_cooldown_days
        self.clock = clock
        self.recorder = AnswerRecorder(db, store, catalog, ttl, clock)
        self.validator = SubmissionValidator(db, store, catalog, ttl, clock)

    # ─── start / resume ─────────────────────────────────────────

    async def start(self, user_id: str, position_id: str) -> ApplicationSession:
        position = resolve_position(self.catalog, position_id)
        async with self.store.lock(user_id, position_id):
            return await self._start_locked(user_id, position)

    async def _start_locked(
        self, user_id: str, position: Position,
    ) -> ApplicationSession:
        position_id = position.id
        now = self.clock()
        self.store.purge_expired(now)
        ctx = ErrorContext(position_id=position_id)

        blocking = await find_blocking(self.db, user_id, position_id)
        if blocking is not None:
            self.store.delete(user_id, position_id)
            ctx.application_id = str(blocking.id)
            raise AlreadyActiveApplicationError(str(blocking.id), blocking.status, ctx)

        rejected = await find_latest_rejected(self.db, user_id, position_id)
        if rejected is not None:
            days_left = cooldown_days_left(
                ensure_utc(rejected.reviewed_at), now, self.rejection_cooldown_days,
            )
            if days_left is not None:
                raise RejectionCooldownError(days_left, ctx)

        draft = await find_draft(self.db, user_id, position_id)
        cached = self.store.get(user_id, position_id)
        if cached is not None and cached.terminal:
            self.store.delete(user_id, position_id)
            cached = None

        if cached is not None and draft is not None:
            if cached.application_id == draft.id:
                logger.info(
                    "Session resumed",
                    extra={"application_id": draft.id, "user_id": user_id},
                )
                return cached
            self.store.delete(user_id, position_id)
            logger.warning(
                "Cached session points at a different application",
                extra={"application_id": cached.application_id, "user_id": user_id},
            )
            ctx.application_id = str(draft.id)
            raise AlreadyActiveApplicationError(str(draft.id), draft.status, ctx)

        if cached is not None:
            # Draft vanished underneath the cache (external cleanup)
            self.store.delete(user_id, position_id)

        if draft is not None:
            return await self._rebuild(draft, position, now)
        return await self._create(user_id, position, now)

    async def _rebuild(
        self, draft: Application, position: Position, now: datetime,
    ) -> ApplicationSession:
        session = session_from_application(draft, position, now, self.ttl)
        draft.expires_at = session.expires_at
        await self.db.commit()
        self.store.put(session)
        logger.info(
            "Session rebuilt from saved answers",
            extra={"application_id": draft.id, "user_id": draft.user_id},
        )
        return session

    async def _create(
        self, user_id: str, position: Position, now: datetime,
    ) -> ApplicationSession:
        application = Application(
            user_id=user_id,
            position_id=position.id,
            status=ApplicationStatus.DRAFT.value,
            started_at=now,
            last_updated_at=now,
            expires_at=now + self.ttl,
            responses=[],
        )
        self.db.add(application)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            existing = await find_draft(self.db, user_id, position.id)
            existing_id = str(existing.id) if existing else ""
            raise AlreadyActiveApplicationError(
                existing_id, ApplicationStatus.DRAFT.value,
                ErrorContext(application_id=existing_id, position_id=position.id),
            )

        session = ApplicationSession(
            application_id=application.id,
            user_id=user_id,
            position_id=position.id,
            current_question=0,
            start_time=now,
            last_active_time=now,
            expires_at=now + self.ttl,
        )
        self.store.put(session)
        logger.info(
            "Application started",
            extra={
                "application_id": application.id,
                "user_id": user_id,
                "position_id": position.id,
            },
        )
        return session

    # ─── mutations ──────────────────────────────────────────────

    async def save_answer(
        self,
        user_id: str,
        position_id: str,
        question_id: str,
        answer: str,
        time_spent: int,
    ) -> ApplicationSession:
        return await self.recorder.save_answer(
            user_id, position_id, question_id, answer, time_spent,
        )

    async def move_to(
        self, user_id: str, position_id: str, index: int,
    ) -> ApplicationSession:
        position = resolve_position(self.catalog, position_id, require_active=False)
        async with self.store.lock(user_id, position_id):
            session = await load_live_session(self.db, self.store, user_id, position_id)
            move_to(session, position, index, self.clock(), self.ttl)
            self.store.put(session)
        return session

    async def submit(self, user_id: str, position_id: str) -> Application:
        return await self.validator.submit(user_id, position_id)

    # ─── read-only views ────────────────────────────────────────

    async def current(self, user_id: str, position_id: str) -> ApplicationSession:
        """Live session without touching it (no TTL slide)."""
        resolve_position(self.catalog, position_id, require_active=False)
        session = self.store.get(user_id, position_id)
        if session is None:
            return await load_live_session(self.db, self.store, user_id, position_id)
        return session

    def view(self, session: ApplicationSession) -> dict:
        """Session snapshot enriched with progress, state and quality scores."""
        position = resolve_position(
            self.catalog, session.position_id, require_active=False,
        )
        return build_session_view(session, position)


def build_session_view(session: ApplicationSession, position: Position) -> dict:
    return {
        "application_id": session.application_id,
        "user_id": session.user_id,
        "position_id": session.position_id,
        "current_question": session.current_question,
        "answers": dict(session.answers),
        "time_per_question": dict(session.time_per_question),
        "start_time": session.start_time,
        "last_active_time": session.last_active_time,
        "expires_at": session.expires_at,
        "progress": compute_progress(session.answers, position),
        "state": derive_intake_state(session, position).value,
        "quality": score_answers(position, session.answers, session.time_per_question),
    }
