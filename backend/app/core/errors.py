"""Error Hierarchy — typed, categorized exceptions for all intake failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (4xx) are recoverable by the caller; infrastructure errors (5xx) are critical
    - to_response() produces the REST envelope; details carry machine-readable payloads
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with IntakeError base: FastAPI global handler catches all (ADR: uniform error shape)
    - Conflicts are explicit variants (AlreadyActiveApplicationError), never inferred from message text
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    IDENTITY = "identity"
    TIMEOUT = "timeout"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    application_id: str | None = None
    position_id: str | None = None
    question_id: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None


class IntakeError(Exception):
    """Base exception for all intake errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.details = details

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        body = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
            "context": {
                "application_id": self.context.application_id,
                "position_id": self.context.position_id,
                "question_id": self.context.question_id,
                "retry_after_ms": self.context.retry_after_ms,
            },
        }
        if self.details is not None:
            body["details"] = self.details
        return {"error": body}


# ─── Domain Errors (4xx) ────────────────────────────────────────

class AnswerValidationError(IntakeError):
    """Answer rejected before any mutation (e.g. required answer left empty)."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400, {"field": field},
        )
        self.field = field


class CursorOutOfRangeError(IntakeError):
    """Navigation target outside [0, question count]."""
    def __init__(self, index: int, question_count: int, context: ErrorContext | None = None):
        super().__init__(
            f"Question index {index} is outside 0..{question_count}",
            "CURSOR_OUT_OF_RANGE", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
            {"index": index, "question_count": question_count},
        )
        self.index = index
        self.question_count = question_count


class ResourceNotFoundError(IntakeError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
            {"resource_type": resource_type, "resource_id": resource_id},
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class PositionNotFoundError(ResourceNotFoundError):
    """Position id unknown to the catalog."""
    def __init__(self, position_id: str, context: ErrorContext | None = None):
        super().__init__("Position", position_id, context)
        self.position_id = position_id


class QuestionNotFoundError(ResourceNotFoundError):
    """Question id is not part of the position."""
    def __init__(self, question_id: str, context: ErrorContext | None = None):
        super().__init__("Question", question_id, context)
        self.question_id = question_id


class PositionInactiveError(IntakeError):
    """Position exists but is not accepting applications."""
    def __init__(self, position_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"Position '{position_id}' is not accepting applications",
            "POSITION_INACTIVE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.position_id = position_id


class SessionExpiredError(IntakeError):
    """Cursor/timer state is gone. Saved answers survive; call start again."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Application session expired or not started. Start the application again to resume.",
            "SESSION_EXPIRED", ErrorCategory.TIMEOUT,
            ErrorSeverity.WARNING, context, 410,
        )


class ApplicationClosedError(IntakeError):
    """Mutation attempted on an application that is no longer a draft."""
    def __init__(self, status: str | None = None, context: ErrorContext | None = None):
        super().__init__(
            "Application has already been submitted and can no longer be changed",
            "APPLICATION_CLOSED", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
            {"status": status} if status else None,
        )
        self.status = status


class IncompleteApplicationError(IntakeError):
    """Submit blocked — required questions missing or empty."""
    def __init__(self, missing: list[str], context: ErrorContext | None = None):
        super().__init__(
            f"Required questions not answered: {', '.join(missing)}",
            "INCOMPLETE_APPLICATION", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 400, {"missing": list(missing)},
        )
        self.missing = list(missing)


class AlreadyActiveApplicationError(IntakeError):
    """Start conflicts with an existing application the caller should be redirected to."""
    def __init__(
        self, application_id: str, status: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            "You already have an active application for this position",
            "ALREADY_ACTIVE_APPLICATION", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
            {"application_id": application_id, "status": status},
        )
        self.application_id = application_id
        self.status = status


class RejectionCooldownError(IntakeError):
    """Recently rejected for this position — must wait before re-applying."""
    def __init__(self, days_left: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = days_left * 86_400_000
        super().__init__(
            f"You were recently rejected for this position. "
            f"Please wait {days_left} more days before applying again",
            "REJECTION_COOLDOWN", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, ctx, 429, {"days_left": days_left},
        )
        self.days_left = days_left


class InvalidStatusTransitionError(IntakeError):
    """Review attempted a backward or sideways status move."""
    def __init__(self, current: str, target: str, context: ErrorContext | None = None):
        super().__init__(
            f"Cannot move application from '{current}' to '{target}'",
            "INVALID_STATUS_TRANSITION", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
            {"current": current, "target": target},
        )
        self.current = current
        self.target = target


class IdentityMissingError(IntakeError):
    """No acting user supplied by the identity layer."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Acting user identity is missing",
            "IDENTITY_MISSING", ErrorCategory.IDENTITY,
            ErrorSeverity.ERROR, context, 401,
        )


# ─── Infrastructure Errors (5xx) ────────────────────────────────

class DatabaseError(IntakeError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class IntakeAPIError(IntakeError):
    """Remote intake API call failed (client side)."""
    def __init__(
        self,
        message: str,
        remote_code: str,
        status_code: int | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Intake API error ({remote_code}): {message}",
            "INTAKE_API_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 503,
            {"remote_code": remote_code, "status_code": status_code},
        )
        self.remote_code = remote_code
        self.status_code = status_code


class StatusPollTimeoutError(IntakeError):
    """Status polling gave up after its attempt budget."""
    def __init__(self, attempts: int, context: ErrorContext | None = None):
        super().__init__(
            f"Application status did not settle after {attempts} attempts",
            "STATUS_POLL_TIMEOUT", ErrorCategory.TIMEOUT,
            ErrorSeverity.ERROR, context, 504, {"attempts": attempts},
        )
        self.attempts = attempts
