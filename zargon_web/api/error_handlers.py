"""Error Handlers — global exception handlers for proxy routes and dashboard pages.

Invariants:
    - ZargonError on /api or /health → structured JSON with code, message, severity
    - LoginRequiredError / SessionExpiredError on a page → 303 to /login with a flash
    - AdminRequiredError on a page → 303 to /dashboard with a flash
    - Other ZargonErrors on a page → error page with the user-facing message
    - RequestValidationError → 400 with field-level details
    - Exception (catch-all) → never leaks internal details; pages get error.html

Design Decisions:
    - Extracted from main.py to keep its import fan-out small
    - Page vs API decided by path prefix, not Accept headers
"""

import logging
from urllib.parse import urlencode

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from zargon_web.api.templating import redirect, render, render_error
from zargon_web.core.errors import (
    AdminRequiredError,
    ErrorSeverity,
    LoginRequiredError,
    SessionExpiredError,
    ZargonError,
)
from zargon_web.services.session_auth import clear_session, flash

logger = logging.getLogger(__name__)

_JSON_PREFIXES = ("/api", "/health")
INTERNAL_ERROR_MESSAGE = "An unexpected error occurred"


def is_page_request(request: Request) -> bool:
    return not request.url.path.startswith(_JSON_PREFIXES)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_zargon_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_zargon_error_handler(app: FastAPI) -> None:
    """Register domain/infrastructure error handler."""

    @app.exception_handler(ZargonError)
    async def zargon_error_handler(request: Request, exc: ZargonError):
        """Handle all Zargon errors; pages redirect or render, API gets JSON."""
        logger.warning(
            f"ZargonError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        if not is_page_request(request):
            return JSONResponse(
                status_code=exc.http_status, content=exc.to_response(),
            )
        return _page_error_response(request, exc)


def _page_error_response(request: Request, exc: ZargonError):
    if isinstance(exc, SessionExpiredError):
        clear_session(request)
        flash(request, exc.flash_message(), "error")
        return redirect("/login")
    if isinstance(exc, LoginRequiredError):
        flash(request, exc.flash_message(), "info")
        target = "/login"
        if exc.next_path not in ("/", "/login"):
            target += "?" + urlencode({"next": exc.next_path})
        return redirect(target)
    if isinstance(exc, AdminRequiredError):
        flash(request, exc.flash_message(), "error")
        return redirect("/dashboard")
    return render(
        request, "error.html",
        {"message": exc.flash_message(), "code": exc.code},
        status_code=exc.http_status,
    )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        if is_page_request(request):
            return render_error(
                request, INTERNAL_ERROR_MESSAGE, "INTERNAL_ERROR",
                status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": INTERNAL_ERROR_MESSAGE,
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
