"""Page Helpers — shared plumbing for dashboard pages and their form actions.

Invariants:
    - Session and role failures always propagate to the global handler
    - Any other ZargonError from a backend call becomes an inline error or a
      flash message; pages never 500 because the backend misbehaved
    - Form data excludes uploaded files; files are read separately
"""

import logging
from typing import Any, Awaitable, TypeVar
from urllib.parse import parse_qsl, urlsplit

from fastapi import Request
from pydantic import BaseModel
from starlette.datastructures import UploadFile

from zargon_web.core.errors import (
    AdminRequiredError,
    FormValidationError,
    LoginRequiredError,
    SessionExpiredError,
    ZargonError,
)
from zargon_web.schemas.forms import validate_form
from zargon_web.services.session_auth import flash

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_AUTH_ERRORS = (SessionExpiredError, LoginRequiredError, AdminRequiredError)


async def fetch(action: Awaitable[Any], default: Any = None) -> tuple[Any, str | None]:
    """Await a backend call for a page: (result, None) or (default, message)."""
    try:
        return await action, None
    except _AUTH_ERRORS:
        raise
    except ZargonError as e:
        logger.warning(
            f"Page backend call failed: {e.message}",
            extra={"error_code": e.code, "status_code": e.context.status_code},
        )
        return default, e.flash_message()


async def attempt(
    request: Request, action: Awaitable[Any], success: str | None = None,
) -> tuple[bool, Any]:
    """Await a form action, flashing its outcome. Returns (ok, result)."""
    result, error = await fetch(action)
    if error is not None:
        flash(request, error, "error")
        return False, None
    if success:
        flash(request, success, "success")
    return True, result


def validated(request: Request, model: type[ModelT], data: dict) -> ModelT | None:
    """Validate form data, flashing the first problem on failure."""
    try:
        return validate_form(model, data)
    except FormValidationError as e:
        flash(request, e.message, "error")
        return None


async def form_data(request: Request) -> dict[str, str]:
    """Posted fields (last value wins), without file uploads."""
    form = await request.form()
    return {
        key: value for key, value in form.multi_items()
        if not isinstance(value, UploadFile)
    }


def query_of(path: str) -> dict[str, str]:
    """Query parameters of a relative URL such as a form's return_to."""
    return dict(parse_qsl(urlsplit(path).query))


def page_number(value: Any, default: int = 1) -> int:
    try:
        return max(int(value), 1)
    except (TypeError, ValueError):
        return default


def find_by_id(items: list[dict], item_id: str) -> dict | None:
    """Backend documents carry ``_id``; some list views use ``id``."""
    for item in items:
        if str(item.get("_id") or item.get("id")) == item_id:
            return item
    return None
