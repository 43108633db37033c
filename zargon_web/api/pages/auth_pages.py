"""Auth Pages — login, logout and the staff first-login password form.

Invariants:
    - Logged-in users visiting /login go straight to /
    - PASSWORD_SET_REQUIRED hands off to /set-password with email and name
    - /set-password without an email goes back to /login
    - Successful password setup logs the staff member in
"""

import logging

from fastapi import APIRouter, Depends, Request

from zargon_web.api.dependencies import get_backend_client
from zargon_web.api.pages.common import form_data
from zargon_web.api.templating import redirect, render, safe_return, url_with
from zargon_web.core.errors import (
    BackendResponseError,
    BackendTimeoutError,
    BackendUnavailableError,
    FormValidationError,
)
from zargon_web.infrastructure.backend_client import ResilientBackendClient
from zargon_web.schemas.auth import LoginForm, SetPasswordForm
from zargon_web.schemas.forms import validate_form
from zargon_web.services.dashboard_gateway import DashboardGateway
from zargon_web.services.session_auth import (
    UNREACHABLE_MESSAGE,
    authenticate,
    clear_session,
    current_user,
    flash,
    store_login,
)

logger = logging.getLogger(__name__)
router = APIRouter(tags=["pages"], include_in_schema=False)


@router.get("/login")
async def login_page(request: Request, next: str = "/"):
    if current_user(request):
        return redirect("/")
    return render(request, "login.html", {"next": safe_return(next, "/"), "email": ""})


@router.post("/login")
async def login_submit(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    form = await form_data(request)
    next_path = safe_return(form.get("next"), "/")
    context = {"next": next_path, "email": form.get("email", "")}
    try:
        credentials = validate_form(LoginForm, form)
    except FormValidationError:
        context["error"] = "Please enter your email and password"
        return render(request, "login.html", context, status_code=400)

    outcome = await authenticate(
        DashboardGateway(client), credentials.email, credentials.password,
    )
    if outcome.password_set_required:
        return redirect(url_with("/set-password", {
            "email": outcome.user.get("email") or credentials.email,
            "name": outcome.user.get("name"),
        }))
    if not outcome.ok:
        context["error"] = outcome.message
        return render(request, "login.html", context)

    store_login(request, outcome.token, outcome.user)
    flash(request, f"Welcome back, {outcome.user.get('name') or credentials.email}!", "success")
    return redirect(next_path)


@router.post("/logout")
async def logout(request: Request):
    clear_session(request)
    flash(request, "You have been logged out.", "info")
    return redirect("/login")


@router.get("/set-password")
async def set_password_page(request: Request, email: str = "", name: str = ""):
    if not email:
        return redirect("/login")
    return render(request, "set_password.html", {"email": email, "name": name})


@router.post("/set-password")
async def set_password_submit(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    form = await form_data(request)
    email = form.get("email", "")
    if not email:
        return redirect("/login")
    context = {"email": email, "name": form.get("name", "")}
    try:
        data = validate_form(SetPasswordForm, form)
    except FormValidationError as e:
        context["error"] = e.message
        return render(request, "set_password.html", context, status_code=400)

    try:
        body = await DashboardGateway(client).set_staff_password(
            data.email, data.new_password,
        )
    except BackendResponseError as e:
        context["error"] = e.message or "Failed to set password"
        return render(request, "set_password.html", context)
    except (BackendUnavailableError, BackendTimeoutError):
        context["error"] = UNREACHABLE_MESSAGE
        return render(request, "set_password.html", context)

    body = body or {}
    if not body.get("token"):
        flash(request, "Password set. Please log in.", "success")
        return redirect("/login")
    store_login(request, body["token"], body.get("user") or {"email": data.email})
    flash(request, "Password set successfully. Welcome!", "success")
    return redirect("/dashboard")
