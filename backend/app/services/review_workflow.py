"""Review Workflow — staff listing, detail and decisions on submitted applications.

Invariants:
    - Decisions follow ALLOWED_REVIEW_TRANSITIONS; anything else raises
      InvalidStatusTransitionError and leaves the row untouched
    - A decision records reviewed_by, reviewed_at and feedback_note together
    - Drafts never appear in staff listings
    - Candidate listings skip applications whose position left the catalog

Design Decisions:
    - Detail views carry quality scores for reviewers; scores never gate a decision
    - Rejection feedback is required at the request boundary (schema), the
      workflow stores whatever note it is given
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import Clock, utc_now
from app.core.domain_types import ApplicationStatus
from app.core.enforce_review import check_review_transition
from app.core.navigate_cursor import intake_state_for_status
from app.core.errors import ErrorContext
from app.core.position import Position
from app.core.repository_protocols import PositionCatalog
from app.core.score_quality import score_answers
from app.models.application import Application
from app.services.application_lookup import get_application_or_404

logger = logging.getLogger(__name__)

_STAFF_QUEUE = (ApplicationStatus.SUBMITTED.value, ApplicationStatus.IN_REVIEW.value)


def _summary(application: Application, position: Position | None) -> dict:
    return {
        "id": application.id,
        "user_id": application.user_id,
        "position_id": application.position_id,
        "position_title": position.title if position else None,
        "position_description": position.description if position else None,
        "status": application.status,
        "state": intake_state_for_status(application.status).value,
        "started_at": application.started_at,
        "submitted_at": application.submitted_at,
        "time_to_complete": application.time_to_complete,
        "reviewed_by": application.reviewed_by,
        "reviewed_at": application.reviewed_at,
        "feedback_note": application.feedback_note,
    }


class ReviewWorkflow:
    def __init__(
        self, db: AsyncSession, catalog: PositionCatalog, clock: Clock = utc_now,
    ):
        self.db = db
        self.catalog = catalog
        self.clock = clock

    def summarize(self, application: Application) -> dict:
        return _summary(application, self.catalog.get(application.position_id))

    async def list_applications(self, status: str = "all") -> list[dict]:
        """Staff queue. "all" means everything awaiting a decision."""
        query = select(Application).order_by(Application.submitted_at.desc())
        if status == "all":
            query = query.where(Application.status.in_(_STAFF_QUEUE))
        else:
            query = query.where(Application.status == ApplicationStatus(status).value)
        result = await self.db.execute(query)
        return [
            self.summarize(a) for a in result.scalars().all()
        ]

    async def get_application_detail(self, application_id: UUID) -> dict:
        application = await get_application_or_404(self.db, application_id)
        position = self.catalog.get(application.position_id)
        detail = _summary(application, position)

        answers = {r.question_id: r.answer for r in application.responses}
        times = {r.question_id: r.time_to_answer for r in application.responses}
        quality = score_answers(position, answers, times) if position else {}

        responses = []
        for response in application.responses:
            question = position.get_question(response.question_id) if position else None
            responses.append({
                "question_id": response.question_id,
                "question_title": question.title if question else None,
                "question_subtitle": question.subtitle if question else None,
                "answer": response.answer,
                "time_to_answer": response.time_to_answer,
                "quality": quality.get(response.question_id),
            })
        if position:
            order = {qid: i for i, qid in enumerate(position.question_ids)}
            responses.sort(key=lambda r: order.get(r["question_id"], len(order)))
        detail["responses"] = responses
        return detail

    async def review(
        self,
        application_id: UUID,
        reviewer_id: str,
        status: str,
        feedback_note: str = "",
    ) -> Application:
        application = await get_application_or_404(self.db, application_id)
        ctx = ErrorContext(
            application_id=str(application.id), position_id=application.position_id,
        )
        check_review_transition(application.status, status, ctx)

        now = self.clock()
        previous = application.status
        application.status = status
        application.reviewed_by = reviewer_id
        application.reviewed_at = now
        application.feedback_note = feedback_note
        application.last_updated_at = now
        await self.db.commit()

        logger.info(
            f"Application reviewed: {previous} -> {status}",
            extra={"application_id": application.id, "user_id": reviewer_id},
        )
        return application

    async def list_user_applications(self, user_id: str) -> list[dict]:
        """Candidate's own applications, newest first."""
        result = await self.db.execute(
            select(Application)
            .where(Application.user_id == user_id)
            .order_by(Application.started_at.desc()),
        )
        rows = []
        for application in result.scalars().all():
            position = self.catalog.get(application.position_id)
            if position is None:
                continue
            rows.append(_summary(application, position))
        return rows
