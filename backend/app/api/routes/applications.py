"""Applications — candidate-facing intake endpoints.

Invariants:
    - Every endpoint acts on behalf of the X-User-Id caller only
    - Mutations return the full SessionView so the UI re-renders without a fetch
    - Routes never contain business logic (delegate to SessionManager / ReviewWorkflow)
"""

import logging

from fastapi import APIRouter, Depends, status

from app.api.dependencies import (
    get_current_user_id, get_review_workflow, get_session_manager,
)
from app.schemas.application import (
    ApplicationSummary, NavigateRequest, SaveAnswerRequest, SessionView,
    StartRequest, SubmitRequest, SubmitResponse,
)
from app.services.review_workflow import ReviewWorkflow
from app.services.session_manager import SessionManager

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/applications", tags=["applications"])


@router.post("/start", response_model=SessionView)
async def start_application(
    body: StartRequest,
    user_id: str = Depends(get_current_user_id),
    manager: SessionManager = Depends(get_session_manager),
):
    """Start a new application or resume the existing draft."""
    session = await manager.start(user_id, body.position_id)
    return manager.view(session)


@router.get("/session/{position_id}", response_model=SessionView)
async def get_current_session(
    position_id: str,
    user_id: str = Depends(get_current_user_id),
    manager: SessionManager = Depends(get_session_manager),
):
    session = await manager.current(user_id, position_id)
    return manager.view(session)


@router.post("/answer", response_model=SessionView)
async def save_answer(
    body: SaveAnswerRequest,
    user_id: str = Depends(get_current_user_id),
    manager: SessionManager = Depends(get_session_manager),
):
    session = await manager.save_answer(
        user_id, body.position_id, body.question_id, body.answer, body.time_spent,
    )
    return manager.view(session)


@router.post("/navigate", response_model=SessionView)
async def navigate(
    body: NavigateRequest,
    user_id: str = Depends(get_current_user_id),
    manager: SessionManager = Depends(get_session_manager),
):
    session = await manager.move_to(user_id, body.position_id, body.index)
    return manager.view(session)


@router.post(
    "/submit", response_model=SubmitResponse, status_code=status.HTTP_201_CREATED,
)
async def submit_application(
    body: SubmitRequest,
    user_id: str = Depends(get_current_user_id),
    manager: SessionManager = Depends(get_session_manager),
):
    application = await manager.submit(user_id, body.position_id)
    return SubmitResponse(
        id=application.id,
        position_id=application.position_id,
        status=application.status,
        submitted_at=application.submitted_at,
        time_to_complete=application.time_to_complete,
    )


@router.get("", response_model=list[ApplicationSummary])
async def list_my_applications(
    user_id: str = Depends(get_current_user_id),
    workflow: ReviewWorkflow = Depends(get_review_workflow),
):
    return await workflow.list_user_applications(user_id)
