"""Error Hierarchy — typed, categorized exceptions for all Contact Book failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - ContactValidationError is raised before any store call (nothing to roll back)
    - PersistenceError covers every store failure, "no such record" included
    - AuthError messages are surfaced verbatim to the user
    - to_response() produces the REST envelope; internal details never leak

Design Decisions:
    - Single hierarchy with ContactBookError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    PERSISTENCE = "persistence"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    contact_id: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class ContactBookError(Exception):
    """Base exception for all Contact Book errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "contact_id": self.context.contact_id,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ContactValidationError(ContactBookError):
    """Required field missing or empty — detected locally, never retried."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class AuthError(ContactBookError):
    """Sign-in/sign-up rejected by the auth gateway."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "AUTH_ERROR", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class NotAuthenticatedError(ContactBookError):
    """No current user — every contact operation is gated on one."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Authentication required",
            "NOT_AUTHENTICATED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class PersistenceError(ContactBookError):
    """A store rejected or failed to complete a request.

    subject names what was being persisted ("Contact" for the contact store,
    "Session" for auth sessions, "Database" when only the session manager knows).
    """
    def __init__(
        self,
        message: str,
        operation: str,
        context: ErrorContext | None = None,
        subject: str = "Contact",
    ):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            f"{subject} {operation} failed: {message}",
            "PERSISTENCE_ERROR", ErrorCategory.PERSISTENCE,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.operation = operation
