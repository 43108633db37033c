"""Templating — Jinja2 environment, filters and the shared page context.

Invariants:
    - Every page gets user, is_admin, tabs, active_tab and flashes
    - Flashes are consumed by the render that shows them
    - Templates only reach formatting helpers through the filters/globals here
    - Helpers see None, never jinja2.Undefined, for keys the backend left out
"""

from functools import wraps
from pathlib import Path
from typing import Any, Callable
from urllib.parse import urlencode, urlsplit

from fastapi import Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from jinja2 import Undefined

from zargon_web.config import get_settings
from zargon_web.core import formatting
from zargon_web.core.navigation import active_tab, tabs_for_role
from zargon_web.services.session_auth import current_user, is_admin, pop_flashes

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def defined_or_none(helper: Callable[..., Any]) -> Callable[..., Any]:
    """Wrap a formatting helper so a missing template value arrives as None."""

    @wraps(helper)
    def wrapper(value: Any = None, *args: Any, **kwargs: Any) -> Any:
        if isinstance(value, Undefined):
            value = None
        return helper(value, *args, **kwargs)

    return wrapper


templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters.update(
    file_size=defined_or_none(formatting.format_file_size),
    time_ago=defined_or_none(formatting.format_time_ago),
    currency=defined_or_none(formatting.format_currency),
    date=defined_or_none(formatting.format_date),
)


def url_with(path: str, params: dict[str, Any] | None = None, **overrides: Any) -> str:
    """``path`` with ``params`` merged with ``overrides``; empty values dropped."""
    merged = {**(params or {}), **overrides}
    query = {k: v for k, v in merged.items() if v not in (None, "", False)}
    return f"{path}?{urlencode(query)}" if query else path


templates.env.globals.update(
    order_status_style=defined_or_none(formatting.order_status_style),
    courier_status=defined_or_none(formatting.courier_status_description),
    notice_style=defined_or_none(formatting.notice_style),
    tier_style=defined_or_none(formatting.tier_style),
    connection_state=defined_or_none(formatting.connection_state),
    stock_style=defined_or_none(formatting.stock_style),
    url_with=url_with,
)


def render(
    request: Request,
    name: str,
    context: dict[str, Any] | None = None,
    status_code: int = 200,
):
    user = current_user(request)
    base = {
        "user": user,
        "is_admin": is_admin(user),
        "tabs": tabs_for_role(user.get("role") if user else None),
        "active_tab": active_tab(request.url.path),
        "flashes": pop_flashes(request),
        "settings": get_settings(),
        "current_url": str(request.url.path) + (
            f"?{request.url.query}" if request.url.query else ""
        ),
    }
    base.update(context or {})
    return templates.TemplateResponse(request, name, base, status_code=status_code)


def redirect(url: str) -> RedirectResponse:
    """POST/redirect/GET."""
    return RedirectResponse(url, status_code=303)


def safe_return(target: Any, default: str) -> str:
    """Same-site relative path from a form's ``return_to``, else ``default``."""
    if not isinstance(target, str) or not target.startswith("/") or target.startswith("//"):
        return default
    parts = urlsplit(target)
    if parts.scheme or parts.netloc:
        return default
    return target


def render_error(request: Request, message: str, code: str, status_code: int):
    """Error page that reads no session state (usable from the catch-all handler)."""
    return templates.TemplateResponse(request, "error.html", {
        "user": None,
        "flashes": [],
        "settings": get_settings(),
        "message": message,
        "code": code,
    }, status_code=status_code)
