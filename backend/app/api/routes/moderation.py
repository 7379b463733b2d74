"""Moderation — staff listing, detail and review decisions.

Invariants:
    - Reviewer identity is the X-User-Id caller, recorded as reviewed_by
    - Drafts are never listed; "all" means submitted + in_review

Design Decisions:
    - Staff authorization is enforced upstream (gateway); these routes only
      require an identity
"""

from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_current_user_id, get_review_workflow
from app.schemas.application import (
    ApplicationDetail, ApplicationSummary, ReviewRequest,
)
from app.services.review_workflow import ReviewWorkflow

router = APIRouter(prefix="/api/v1/moderation", tags=["moderation"])


@router.get("/applications", response_model=list[ApplicationSummary])
async def list_applications(
    status: Literal["all", "submitted", "in_review", "approved", "rejected"] = Query("all"),
    _reviewer: str = Depends(get_current_user_id),
    workflow: ReviewWorkflow = Depends(get_review_workflow),
):
    return await workflow.list_applications(status)


@router.get("/applications/{application_id}", response_model=ApplicationDetail)
async def get_application(
    application_id: UUID,
    _reviewer: str = Depends(get_current_user_id),
    workflow: ReviewWorkflow = Depends(get_review_workflow),
):
    return await workflow.get_application_detail(application_id)


@router.post("/applications/{application_id}/review", response_model=ApplicationSummary)
async def review_application(
    application_id: UUID,
    body: ReviewRequest,
    reviewer_id: str = Depends(get_current_user_id),
    workflow: ReviewWorkflow = Depends(get_review_workflow),
):
    application = await workflow.review(
        application_id, reviewer_id, body.status, body.feedback_note,
    )
    return workflow.summarize(application)
