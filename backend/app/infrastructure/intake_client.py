"""Intake API Client — async httpx client for the intake REST surface.

Invariants:
    - Every non-2xx response with an error envelope is raised as the matching typed
      IntakeError (same class the server raised), context included
    - Transport failures and unknown codes surface as IntakeAPIError, never raw httpx errors
    - wait_for_decision polls at most max_attempts times, then StatusPollTimeoutError

Design Decisions:
    - Identity travels as X-User-Id; the bearer token authenticates the caller service
    - Poll delay: exponential backoff with ±25% jitter, capped at max_delay_ms
    - Transport is injectable so tests drive the client with httpx.MockTransport
    - build_intake_client() is the one place Settings turn into a client
"""

import asyncio
import logging
import random
from typing import Any, Callable

import httpx

from app.config import Settings
from app.core.domain_types import ApplicationStatus
from app.core.errors import (
    AlreadyActiveApplicationError, AnswerValidationError, ApplicationClosedError,
    CursorOutOfRangeError, ErrorContext, IdentityMissingError,
    IncompleteApplicationError, IntakeAPIError, IntakeError,
    InvalidStatusTransitionError, PositionInactiveError, RejectionCooldownError,
    ResourceNotFoundError, SessionExpiredError, StatusPollTimeoutError,
)

logger = logging.getLogger(__name__)

_DECIDED = frozenset({ApplicationStatus.APPROVED.value, ApplicationStatus.REJECTED.value})

# code → factory(message, details, context)
_ERROR_FACTORIES: dict[str, Callable[[str, dict, ErrorContext], IntakeError]] = {
    "VALIDATION_ERROR": lambda m, d, c: AnswerValidationError(m, d.get("field", ""), c),
    "CURSOR_OUT_OF_RANGE": lambda m, d, c: CursorOutOfRangeError(
        d.get("index", -1), d.get("question_count", 0), c,
    ),
    "RESOURCE_NOT_FOUND": lambda m, d, c: ResourceNotFoundError(
        d.get("resource_type", "Resource"), d.get("resource_id", ""), c,
    ),
    "POSITION_INACTIVE": lambda m, d, c: PositionInactiveError(c.position_id or "", c),
    "SESSION_EXPIRED": lambda m, d, c: SessionExpiredError(c),
    "APPLICATION_CLOSED": lambda m, d, c: ApplicationClosedError(d.get("status"), c),
    "INCOMPLETE_APPLICATION": lambda m, d, c: IncompleteApplicationError(
        d.get("missing", []), c,
    ),
    "ALREADY_ACTIVE_APPLICATION": lambda m, d, c: AlreadyActiveApplicationError(
        d.get("application_id", ""), d.get("status", ""), c,
    ),
    "REJECTION_COOLDOWN": lambda m, d, c: RejectionCooldownError(d.get("days_left", 1), c),
    "INVALID_STATUS_TRANSITION": lambda m, d, c: InvalidStatusTransitionError(
        d.get("current", ""), d.get("target", ""), c,
    ),
    "IDENTITY_MISSING": lambda m, d, c: IdentityMissingError(c),
}


def error_from_response(response: httpx.Response) -> IntakeError:
    """Rebuild the typed error a server-side handler serialized."""
    try:
        body = response.json()["error"]
    except (ValueError, KeyError, TypeError):
        return IntakeAPIError(
            response.text[:200] or response.reason_phrase,
            "http_error", response.status_code,
        )
    remote_ctx = body.get("context") or {}
    ctx = ErrorContext(
        application_id=remote_ctx.get("application_id"),
        position_id=remote_ctx.get("position_id"),
        question_id=remote_ctx.get("question_id"),
        retry_after_ms=remote_ctx.get("retry_after_ms"),
    )
    code = body.get("code", "")
    message = body.get("message", "")
    factory = _ERROR_FACTORIES.get(code)
    if factory is None:
        return IntakeAPIError(message, code or "unknown", response.status_code, ctx)
    return factory(message, body.get("details") or {}, ctx)


class IntakeApiClient:
    """Typed async wrapper over the /api/v1 intake endpoints for one user."""

    def __init__(
        self,
        base_url: str,
        token: str,
        user_id: str,
        timeout_seconds: int = 30,
        max_attempts: int = 10,
        base_delay_ms: int = 1000,
        max_delay_ms: int = 30_000,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + "/api/v1",
            headers={
                "Authorization": f"Bearer {token}",
                "X-User-Id": user_id,
            },
            timeout=timeout_seconds,
            transport=transport,
        )
        self.user_id = user_id
        self.max_attempts = max_attempts
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms

    async def __aenter__(self) -> "IntakeApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self.client.aclose()

    # ─── candidate operations ───────────────────────────────────

    async def start(self, position_id: str) -> dict:
        return await self._request(
            "POST", "/applications/start", json={"position_id": position_id},
        )

    async def save_answer(
        self, position_id: str, question_id: str, answer: str, time_spent: int = 0,
    ) -> dict:
        return await self._request(
            "POST", "/applications/answer",
            json={
                "position_id": position_id,
                "question_id": question_id,
                "answer": answer,
                "time_spent": time_spent,
            },
        )

    async def move_to(self, position_id: str, index: int) -> dict:
        return await self._request(
            "POST", "/applications/navigate",
            json={"position_id": position_id, "index": index},
        )

    async def submit(self, position_id: str) -> dict:
        return await self._request(
            "POST", "/applications/submit", json={"position_id": position_id},
        )

    async def list_applications(self) -> list[dict]:
        return await self._request("GET", "/applications")

    async def wait_for_decision(self, application_id: str) -> dict:
        """Poll the user's applications until this one is approved or rejected."""
        for attempt in range(self.max_attempts):
            for row in await self.list_applications():
                if str(row.get("id")) == str(application_id) and row.get("status") in _DECIDED:
                    logger.info(
                        "Application decided",
                        extra={"application_id": application_id, "attempt": attempt + 1},
                    )
                    return row
            if attempt + 1 < self.max_attempts:
                delay = self._backoff(attempt)
                logger.warning(
                    f"Decision pending, polling again in {delay}ms",
                    extra={"application_id": application_id, "attempt": attempt + 1},
                )
                await asyncio.sleep(delay / 1000)
        raise StatusPollTimeoutError(
            self.max_attempts, ErrorContext(application_id=str(application_id)),
        )

    # ─── transport ──────────────────────────────────────────────

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise IntakeAPIError(f"Request timed out: {e}", "timeout")
        except httpx.TransportError as e:
            raise IntakeAPIError(f"Connection failed: {e}", "connection_error")
        if response.is_success:
            return response.json()
        error = error_from_response(response)
        logger.warning(
            f"Intake API returned {response.status_code}",
            extra={"error_code": error.code, "path": path, "status": response.status_code},
        )
        raise error

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = (2 ** attempt) * self.base_delay_ms
        jittered = int(delay * random.uniform(0.75, 1.25))  # nosec B311
        return min(self.max_delay_ms, jittered)


def build_intake_client(
    settings: Settings,
    user_id: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> IntakeApiClient:
    """Client for one user, configured from the intake_api_* / status_poll_* settings."""
    return IntakeApiClient(
        base_url=settings.intake_api_base_url,
        token=settings.intake_api_token,
        user_id=user_id,
        timeout_seconds=settings.intake_api_timeout_seconds,
        max_attempts=settings.status_poll_max_attempts,
        base_delay_ms=settings.status_poll_base_delay_ms,
        max_delay_ms=settings.status_poll_max_delay_ms,
        transport=transport,
    )
