"""Error Hierarchy — typed, categorized exceptions for all proxy and dashboard failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Backend errors carry the backend path and method they came from
    - to_response() produces the REST envelope; flash_message() the dashboard text
    - No token or internal traceback ever appears in a user-facing message

Design Decisions:
    - Single hierarchy with ZargonError base: one global handler catches all
    - ErrorContext as dataclass: observability data without coupling to logging
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
    AUTHORIZATION = "authorization"
    EXTERNAL_API = "external_api"
    TIMEOUT = "timeout"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    backend_path: str | None = None
    method: str | None = None
    status_code: int | None = None
    debug_info: dict[str, Any] | None = None


class ZargonError(Exception):
    """Base exception for all Zargon web errors."""

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
                    "backend_path": self.context.backend_path,
                    "method": self.context.method,
                    "status_code": self.context.status_code,
                },
            }
        }

    def flash_message(self) -> str:
        """Message shown to a dashboard user."""
        return self.message


# ─── Dashboard Errors (400-level) ───────────────────────────────

class FormValidationError(ZargonError):
    """Dashboard form input rejected before reaching the backend."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.field = field


class LoginRequiredError(ZargonError):
    """Dashboard page requested without a session."""
    def __init__(self, next_path: str = "/", context: ErrorContext | None = None):
        super().__init__(
            "Please log in to continue.",
            "LOGIN_REQUIRED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.INFO, context, 401,
        )
        self.next_path = next_path


class SessionExpiredError(ZargonError):
    """Backend rejected the session token (401)."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Your session has expired. Please log in again.",
            "SESSION_EXPIRED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class AdminRequiredError(ZargonError):
    """Staff user requested an admin-only page or action."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Admin access required.",
            "ADMIN_REQUIRED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


# ─── Backend Errors ─────────────────────────────────────────────

class BackendResponseError(ZargonError):
    """Backend answered with a non-2xx status."""
    def __init__(
        self,
        status_code: int,
        body: Any = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.status_code = status_code
        super().__init__(
            extract_backend_message(body) or f"Backend responded with status {status_code}",
            "BACKEND_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, ctx, status_code,
        )
        self.status_code = status_code
        self.body = body

    @property
    def backend_code(self) -> str | None:
        """The backend's own error code (e.g. PASSWORD_SET_REQUIRED), if any."""
        if isinstance(self.body, dict):
            err = self.body.get("error")
            if isinstance(err, dict):
                return err.get("code")
            return self.body.get("code")
        return None


class InvalidBackendPayloadError(ZargonError):
    """Backend answered 2xx with a body that is not valid JSON."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid JSON from backend: {message}",
            "INVALID_BACKEND_PAYLOAD", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context, 502,
        )


class BackendUnavailableError(ZargonError):
    """Backend could not be reached after retries."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Backend unavailable: {message}",
            "BACKEND_UNAVAILABLE", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 502,
        )

    def flash_message(self) -> str:
        return "Cannot connect to server. Please try again in a moment."


class BackendTimeoutError(ZargonError):
    """Backend did not answer within the configured timeout."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Backend request timed out",
            "BACKEND_TIMEOUT", ErrorCategory.TIMEOUT,
            ErrorSeverity.CRITICAL, context, 504,
        )

    def flash_message(self) -> str:
        return "Server error. Please try again in a moment."


def extract_backend_message(body: Any) -> str | None:
    """Best-effort human message from a backend error body.

    The backend uses both ``{"error": {"message": ...}}`` and
    ``{"error": "...", "message": "..."}`` shapes.
    """
    if isinstance(body, str):
        return body.strip() or None
    if not isinstance(body, dict):
        return None
    err = body.get("error")
    if isinstance(err, dict) and err.get("message"):
        return str(err["message"])
    if body.get("message"):
        return str(body["message"])
    if isinstance(err, str) and err:
        return err
    return None
