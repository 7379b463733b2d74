"""Intake API Client — request shape, typed error mapping and bounded polling.

Tests cover:
    - Identity and bearer headers on every request
    - Error envelopes rebuilt as the matching typed IntakeError
    - Non-envelope failures and transport errors → IntakeAPIError
    - wait_for_decision returns on a decision, gives up after max_attempts
    - Backoff stays within the jitter band and the cap
    - build_intake_client wires every client setting from Settings
"""

import json
import random

import httpx
import pytest

from app.core.errors import (
    AlreadyActiveApplicationError, IncompleteApplicationError, IntakeAPIError,
    RejectionCooldownError, SessionExpiredError, StatusPollTimeoutError,
)
from app.config import Settings
from app.infrastructure.intake_client import IntakeApiClient, build_intake_client


def _client(handler, **kwargs) -> IntakeApiClient:
    kwargs.setdefault("base_delay_ms", 0)
    return IntakeApiClient(
        "http://intake.test", "token-123", "u1",
        transport=httpx.MockTransport(handler), **kwargs,
    )


def _envelope(status: int, code: str, details=None, context=None) -> httpx.Response:
    body = {"error": {
        "code": code, "message": "boom", "category": "x", "severity": "error",
        "timestamp": "2026-03-01T00:00:00+00:00",
        "context": context or {},
    }}
    if details is not None:
        body["error"]["details"] = details
    return httpx.Response(status, json=body)


async def test_start_sends_identity_and_body():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["headers"] = request.headers
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"application_id": "a-1", "current_question": 0})

    async with _client(handler) as client:
        body = await client.start("pos")

    assert body["application_id"] == "a-1"
    assert seen["path"] == "/api/v1/applications/start"
    assert seen["headers"]["x-user-id"] == "u1"
    assert seen["headers"]["authorization"] == "Bearer token-123"
    assert seen["body"] == {"position_id": "pos"}


async def test_incomplete_envelope_maps_to_typed_error():
    def handler(request):
        return _envelope(
            400, "INCOMPLETE_APPLICATION", {"missing": ["q2"]},
            {"application_id": "a-1", "position_id": "pos"},
        )

    async with _client(handler) as client:
        with pytest.raises(IncompleteApplicationError) as exc_info:
            await client.submit("pos")
    assert exc_info.value.missing == ["q2"]
    assert exc_info.value.context.application_id == "a-1"


async def test_conflict_and_cooldown_envelopes():
    responses = iter([
        _envelope(409, "ALREADY_ACTIVE_APPLICATION", {"application_id": "a-9", "status": "submitted"}),
        _envelope(429, "REJECTION_COOLDOWN", {"days_left": 4}),
        _envelope(410, "SESSION_EXPIRED"),
    ])

    async with _client(lambda request: next(responses)) as client:
        with pytest.raises(AlreadyActiveApplicationError) as active:
            await client.start("pos")
        with pytest.raises(RejectionCooldownError) as cooldown:
            await client.start("pos")
        with pytest.raises(SessionExpiredError):
            await client.save_answer("pos", "q1", "Ada", 3)

    assert active.value.application_id == "a-9"
    assert cooldown.value.days_left == 4


async def test_unknown_code_and_plain_failure_map_to_api_error():
    responses = iter([
        _envelope(500, "INTERNAL_ERROR"),
        httpx.Response(502, text="bad gateway"),
    ])

    async with _client(lambda request: next(responses)) as client:
        with pytest.raises(IntakeAPIError) as unknown:
            await client.list_applications()
        with pytest.raises(IntakeAPIError) as plain:
            await client.list_applications()

    assert unknown.value.remote_code == "INTERNAL_ERROR"
    assert plain.value.status_code == 502


async def test_transport_error_maps_to_api_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(IntakeAPIError) as exc_info:
            await client.move_to("pos", 1)
    assert exc_info.value.remote_code == "connection_error"


async def test_wait_for_decision_returns_decided_row():
    statuses = iter(["submitted", "in_review", "approved"])
    calls = []

    def handler(request):
        calls.append(request.url.path)
        return httpx.Response(200, json=[{"id": "a-1", "status": next(statuses)}])

    async with _client(handler, max_attempts=5) as client:
        row = await client.wait_for_decision("a-1")

    assert row["status"] == "approved"
    assert len(calls) == 3


async def test_wait_for_decision_gives_up_after_max_attempts():
    calls = []

    def handler(request):
        calls.append(1)
        return httpx.Response(200, json=[{"id": "a-1", "status": "in_review"}])

    async with _client(handler, max_attempts=3) as client:
        with pytest.raises(StatusPollTimeoutError) as exc_info:
            await client.wait_for_decision("a-1")

    assert len(calls) == 3
    assert exc_info.value.attempts == 3
    assert exc_info.value.http_status == 504


def test_backoff_within_jitter_and_cap():
    client = IntakeApiClient(
        "http://intake.test", "t", "u1", base_delay_ms=1000, max_delay_ms=5000,
        transport=httpx.MockTransport(lambda r: httpx.Response(200)),
    )
    random.seed(7)
    for attempt in range(3):
        delay = client._backoff(attempt)
        nominal = (2 ** attempt) * 1000
        assert 0.75 * nominal <= delay <= 1.25 * nominal
    assert all(client._backoff(10) <= 5000 for _ in range(20))


async def test_build_intake_client_from_settings():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["headers"] = request.headers
        return httpx.Response(200, json=[])

    settings = Settings(
        intake_api_base_url="http://intake.internal/",
        intake_api_token="svc-token",
        intake_api_timeout_seconds=5,
        status_poll_max_attempts=4,
        status_poll_base_delay_ms=250,
        status_poll_max_delay_ms=2000,
    )
    client = build_intake_client(settings, "u9", transport=httpx.MockTransport(handler))
    async with client:
        assert await client.list_applications() == []

    assert seen["url"] == "http://intake.internal/api/v1/applications"
    assert seen["headers"]["authorization"] == "Bearer svc-token"
    assert seen["headers"]["x-user-id"] == "u9"
    assert client.max_attempts == 4
    assert client.base_delay_ms == 250
    assert client.max_delay_ms == 2000
    assert client.client.timeout.read == 5
