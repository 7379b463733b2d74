"""Error Handlers — global exception handlers for the intake API.

Invariants:
    - IntakeError → its own http_status and to_response() envelope
    - RequestValidationError → 400 VALIDATION_ERROR with field-level details
    - Exception (catch-all) → 500, never leaks internal details

Design Decisions:
    - Caller mistakes (4xx) log at warning, infrastructure failures (5xx) at error
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from app.core.errors import IntakeError, ErrorSeverity

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    _register_intake_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_intake_error_handler(app: FastAPI) -> None:

    @app.exception_handler(IntakeError)
    async def intake_error_handler(request: Request, exc: IntakeError):
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"IntakeError: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "status": exc.http_status,
                "application_id": exc.context.application_id,
                "position_id": exc.context.position_id,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    errors = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.WARNING.value,
            "context": {},
            "details": {
                "field": errors[0]["field"] if errors else "",
                "errors": errors,
            },
        },
    }
