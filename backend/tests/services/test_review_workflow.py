"""Review Workflow — staff queue, detail view and decisions.

Tests cover:
    - Drafts never reach the staff queue; "all" = submitted + in_review
    - Detail view carries ordered responses with quality scores
    - Allowed and rejected status transitions
    - Candidate listing skips positions no longer in the catalog
"""

import uuid
from datetime import timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from app.core.errors import InvalidStatusTransitionError, ResourceNotFoundError
from app.infrastructure.position_catalog import StaticPositionCatalog
from app.models.application import Application
from app.services.review_workflow import ReviewWorkflow


async def _submitted(manager, user_id: str) -> Application:
    await manager.start(user_id, "pos")
    await manager.save_answer(user_id, "pos", "q2", "Because engines", 30)
    await manager.save_answer(user_id, "pos", "q1", "Ada Lovelace", 12)
    return await manager.submit(user_id, "pos")


async def test_queue_excludes_drafts(manager, workflow):
    submitted = await _submitted(manager, "u1")
    await manager.start("u2", "pos")

    queue = await workflow.list_applications("all")
    assert [row["id"] for row in queue] == [submitted.id]
    assert queue[0]["position_title"] == "Position pos"


async def test_queue_filters_by_status(manager, workflow):
    first = await _submitted(manager, "u1")
    second = await _submitted(manager, "u2")
    await workflow.review(second.id, "staff", "in_review")

    assert [r["id"] for r in await workflow.list_applications("submitted")] == [first.id]
    assert [r["id"] for r in await workflow.list_applications("in_review")] == [second.id]
    assert len(await workflow.list_applications("all")) == 2
    assert await workflow.list_applications("approved") == []


async def test_detail_orders_responses_and_scores_them(manager, workflow):
    submitted = await _submitted(manager, "u1")
    detail = await workflow.get_application_detail(submitted.id)

    assert [r["question_id"] for r in detail["responses"]] == ["q1", "q2"]
    assert detail["responses"][0]["question_title"] == "Name"
    assert detail["responses"][0]["quality"] == 2
    assert detail["responses"][1]["quality"] == 1


async def test_detail_unknown_application(workflow):
    with pytest.raises(ResourceNotFoundError):
        await workflow.get_application_detail(uuid.uuid4())


async def test_review_records_decision(manager, workflow, clock):
    submitted = await _submitted(manager, "u1")
    clock.advance(hours=3)

    reviewed = await workflow.review(submitted.id, "staff-7", "approved", "Welcome")

    assert reviewed.status == "approved"
    assert reviewed.reviewed_by == "staff-7"
    assert reviewed.reviewed_at == clock.now
    assert reviewed.feedback_note == "Welcome"


async def test_review_in_review_then_rejected(manager, workflow):
    submitted = await _submitted(manager, "u1")
    await workflow.review(submitted.id, "staff", "in_review")
    rejected = await workflow.review(submitted.id, "staff", "rejected", "Not yet")
    assert rejected.status == "rejected"


async def test_decided_application_cannot_move(manager, workflow):
    submitted = await _submitted(manager, "u1")
    await workflow.review(submitted.id, "staff", "approved")
    with pytest.raises(InvalidStatusTransitionError):
        await workflow.review(submitted.id, "staff", "rejected", "Changed mind")


async def test_draft_cannot_be_reviewed(manager, workflow):
    session = await manager.start("u1", "pos")
    with pytest.raises(InvalidStatusTransitionError):
        await workflow.review(session.application_id, "staff", "approved")


async def test_user_listing_skips_retired_positions(manager, test_db, clock):
    await _submitted(manager, "u1")
    await manager.start("u1", "optional")

    full = ReviewWorkflow(test_db, manager.catalog, clock)
    assert {r["position_id"] for r in await full.list_user_applications("u1")} == {
        "pos", "optional",
    }

    retired = ReviewWorkflow(
        test_db, StaticPositionCatalog((manager.catalog.get("pos"),)), clock,
    )
    rows = await retired.list_user_applications("u1")
    assert [r["position_id"] for r in rows] == ["pos"]


async def test_one_draft_per_user_and_position(test_db, clock):
    for _ in range(2):
        test_db.add(Application(
            user_id="u1", position_id="pos", status="draft",
            started_at=clock.now, last_updated_at=clock.now,
            expires_at=clock.now + timedelta(days=7),
        ))
    with pytest.raises(IntegrityError):
        await test_db.commit()
