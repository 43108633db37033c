"""Session Auth — dashboard login state, flash messages and role guards.

Invariants:
    - The signed session cookie holds only ``token``, ``user``, flashes and
      dismissed notice ids; nothing else is persisted between requests
    - Logging in replaces the whole session (no leftovers from a previous user)
    - Flashes are shown exactly once
    - require_user/require_admin raise; they never render or redirect themselves

Design Decisions:
    - Login outcome as a small dataclass: the page decides between redirect,
      set-password hand-off and re-rendering the form with a message
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from fastapi import Request

from zargon_web.core.domain_types import UserRole
from zargon_web.core.errors import (
    AdminRequiredError,
    BackendResponseError,
    BackendTimeoutError,
    BackendUnavailableError,
    LoginRequiredError,
)
from zargon_web.services.dashboard_gateway import DashboardGateway

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"
FLASH_KEY = "_flashes"
DISMISSED_KEY = "dismissed_notices"

PASSWORD_SET_REQUIRED = "PASSWORD_SET_REQUIRED"
ACCOUNT_INACTIVE = "ACCOUNT_INACTIVE"

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
INACTIVE_MESSAGE = "Your account has been deactivated. Please contact admin."
UNREACHABLE_MESSAGE = "Cannot connect to server."


# ─── Session state ──────────────────────────────────────────────

def current_user(request: Request) -> dict | None:
    user = request.session.get(USER_KEY)
    return user if isinstance(user, dict) else None


def current_token(request: Request) -> str | None:
    return request.session.get(TOKEN_KEY)


def store_login(request: Request, token: str, user: dict) -> None:
    """Start a fresh session for ``user``."""
    request.session.clear()
    request.session[TOKEN_KEY] = token
    request.session[USER_KEY] = {
        "id": user.get("id") or user.get("_id"),
        "name": user.get("name"),
        "email": user.get("email"),
        "role": user.get("role") or UserRole.STAFF.value,
    }
    logger.info("Dashboard login", extra={"has_auth": True})


def clear_session(request: Request) -> None:
    request.session.clear()


def is_admin(user: dict | None) -> bool:
    return bool(user) and user.get("role") == UserRole.ADMIN.value


# ─── Flash messages ─────────────────────────────────────────────

def flash(request: Request, message: str, category: str = "info") -> None:
    flashes = list(request.session.get(FLASH_KEY, []))
    flashes.append({"message": message, "category": category})
    request.session[FLASH_KEY] = flashes


def pop_flashes(request: Request) -> list[dict]:
    return request.session.pop(FLASH_KEY, None) or []


# ─── Notice dismissal ───────────────────────────────────────────

def dismissed_notices(request: Request) -> set[str]:
    return set(request.session.get(DISMISSED_KEY, []))


def dismiss_notice(request: Request, notice_id: str) -> None:
    dismissed = dismissed_notices(request)
    dismissed.add(notice_id)
    request.session[DISMISSED_KEY] = sorted(dismissed)


# ─── Guards (FastAPI dependencies) ──────────────────────────────

def require_user(request: Request) -> dict:
    user = current_user(request)
    if user is None or not current_token(request):
        raise LoginRequiredError(next_path=request.url.path)
    return user


def require_admin(request: Request) -> dict:
    user = require_user(request)
    if not is_admin(user):
        raise AdminRequiredError()
    return user


# ─── Login ──────────────────────────────────────────────────────

@dataclass
class LoginOutcome:
    """Result of a login attempt as the login page needs it."""
    ok: bool = False
    token: str | None = None
    user: dict = field(default_factory=dict)
    password_set_required: bool = False
    message: str | None = None


def _error_code(body: Any) -> str | None:
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return body["error"].get("code")
    return None


async def authenticate(gateway: DashboardGateway, email: str, password: str) -> LoginOutcome:
    """Log in against the backend and classify the answer."""
    try:
        body = await gateway.login(email, password)
    except BackendResponseError as e:
        if e.status_code == 401:
            message = (
                INACTIVE_MESSAGE if e.backend_code == ACCOUNT_INACTIVE
                else INVALID_CREDENTIALS_MESSAGE
            )
            return LoginOutcome(message=message)
        return LoginOutcome(message=e.message or "Login failed")
    except (BackendUnavailableError, BackendTimeoutError):
        return LoginOutcome(message=UNREACHABLE_MESSAGE)

    body = body or {}
    if _error_code(body) == PASSWORD_SET_REQUIRED:
        return LoginOutcome(password_set_required=True, user=body.get("user") or {})
    token = body.get("token")
    if not token:
        return LoginOutcome(message="Login failed")
    return LoginOutcome(ok=True, token=token, user=body.get("user") or {})
