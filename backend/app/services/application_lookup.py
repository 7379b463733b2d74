"""Application Lookup — shared queries and session (re)construction for intake services.

Invariants:
    - Position resolution raises PositionNotFoundError / PositionInactiveError, never returns None
    - A session rebuilt from the DB carries every persisted answer and accumulated time,
      with the cursor at the first unanswered question
    - load_live_session never returns a terminal or expired session silently:
      terminal → ApplicationClosedError, missing/expired → SessionExpiredError
      (unless the user's application is already closed)

Design Decisions:
    - Plain async functions over a repository class: every caller already holds
      the AsyncSession and the calls are one-liners
    - Response upsert goes through application.responses so the in-memory
      aggregate and the DB stay consistent inside one unit of work
"""

import logging
from datetime import datetime, timedelta
from typing import NoReturn
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.application_session import ApplicationSession
from app.core.clock import ensure_utc
from app.core.domain_types import ApplicationStatus, BLOCKING_STATUSES
from app.core.errors import (
    ApplicationClosedError, ErrorContext, PositionInactiveError,
    PositionNotFoundError, ResourceNotFoundError, SessionExpiredError,
)
from app.core.navigate_cursor import first_unanswered_index
from app.core.position import Position
from app.core.repository_protocols import PositionCatalog, SessionStore
from app.models.application import Application
from app.models.response import Response

logger = logging.getLogger(__name__)


def resolve_position(
    catalog: PositionCatalog, position_id: str, require_active: bool = True,
) -> Position:
    position = catalog.get(position_id)
    ctx = ErrorContext(position_id=position_id)
    if position is None:
        raise PositionNotFoundError(position_id, ctx)
    if require_active and not position.active:
        raise PositionInactiveError(position_id, ctx)
    return position


async def find_application(
    db: AsyncSession, application_id: UUID,
) -> Application | None:
    result = await db.execute(
        select(Application).where(Application.id == application_id),
    )
    return result.scalar_one_or_none()


async def get_application_or_404(
    db: AsyncSession, application_id: UUID,
) -> Application:
    application = await find_application(db, application_id)
    if not application:
        raise ResourceNotFoundError("Application", str(application_id))
    return application


async def find_draft(
    db: AsyncSession, user_id: str, position_id: str,
) -> Application | None:
    result = await db.execute(
        select(Application)
        .where(Application.user_id == user_id)
        .where(Application.position_id == position_id)
        .where(Application.status == ApplicationStatus.DRAFT.value),
    )
    return result.scalar_one_or_none()


async def find_blocking(
    db: AsyncSession, user_id: str, position_id: str,
) -> Application | None:
    """Submitted, in-review or approved application for this user and position."""
    result = await db.execute(
        select(Application)
        .where(Application.user_id == user_id)
        .where(Application.position_id == position_id)
        .where(Application.status.in_([s.value for s in BLOCKING_STATUSES]))
        .order_by(Application.started_at.desc())
        .limit(1),
    )
    return result.scalar_one_or_none()


async def find_latest_rejected(
    db: AsyncSession, user_id: str, position_id: str,
) -> Application | None:
    result = await db.execute(
        select(Application)
        .where(Application.user_id == user_id)
        .where(Application.position_id == position_id)
        .where(Application.status == ApplicationStatus.REJECTED.value)
        .where(Application.reviewed_at.is_not(None))
        .order_by(Application.reviewed_at.desc())
        .limit(1),
    )
    return result.scalar_one_or_none()


async def find_latest_closed(
    db: AsyncSession, user_id: str, position_id: str,
) -> Application | None:
    """Most recent non-draft application for this user and position."""
    result = await db.execute(
        select(Application)
        .where(Application.user_id == user_id)
        .where(Application.position_id == position_id)
        .where(Application.status != ApplicationStatus.DRAFT.value)
        .order_by(Application.started_at.desc())
        .limit(1),
    )
    return result.scalar_one_or_none()


def saved_answers(application: Application) -> tuple[dict[str, str], dict[str, int]]:
    """Committed answers and accumulated seconds, keyed by question id."""
    answers = {r.question_id: r.answer for r in application.responses}
    times = {r.question_id: r.time_to_answer for r in application.responses}
    return answers, times


def session_from_application(
    application: Application,
    position: Position,
    now: datetime,
    ttl: timedelta,
) -> ApplicationSession:
    """Rebuild ephemeral state from persisted responses. Cursor is recomputed."""
    answers, times = saved_answers(application)
    return ApplicationSession(
        application_id=application.id,
        user_id=application.user_id,
        position_id=application.position_id,
        current_question=first_unanswered_index(position, answers),
        answers=answers,
        time_per_question=times,
        start_time=ensure_utc(application.started_at),
        last_active_time=now,
        expires_at=now + ttl,
        terminal=application.status != ApplicationStatus.DRAFT.value,
    )


def upsert_response(
    application: Application,
    question_id: str,
    answer: str,
    time_to_answer: int,
    now: datetime,
) -> Response:
    for response in application.responses:
        if response.question_id == question_id:
            response.answer = answer
            response.time_to_answer = time_to_answer
            response.updated_at = now
            return response
    response = Response(
        question_id=question_id,
        answer=answer,
        time_to_answer=time_to_answer,
        created_at=now,
        updated_at=now,
    )
    application.responses.append(response)
    return response


async def raise_for_missing_session(
    db: AsyncSession, user_id: str, position_id: str,
) -> NoReturn:
    """No live session: closed application → ApplicationClosedError, else expired."""
    ctx = ErrorContext(position_id=position_id)
    draft = await find_draft(db, user_id, position_id)
    if draft is None:
        closed = await find_latest_closed(db, user_id, position_id)
        if closed is not None:
            ctx.application_id = str(closed.id)
            raise ApplicationClosedError(closed.status, ctx)
    raise SessionExpiredError(ctx)


async def load_live_session(
    db: AsyncSession, store: SessionStore, user_id: str, position_id: str,
) -> ApplicationSession:
    """Live, non-terminal session for a mutation, or the matching typed error."""
    session = store.get(user_id, position_id)
    if session is None:
        await raise_for_missing_session(db, user_id, position_id)
    if session.terminal:
        raise ApplicationClosedError(
            ApplicationStatus.SUBMITTED.value,
            ErrorContext(
                application_id=str(session.application_id), position_id=position_id,
            ),
        )
    return session
