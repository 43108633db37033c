"""Admin Panel — profile, staff accounts, all users and the activity report.

Invariants:
    - Every route here is admin-only
    - A profile update refreshes the name and email kept in the session
    - The activity report filters by staff member, action and date range
"""

from fastapi import APIRouter, Depends, Request

from zargon_web.api.dependencies import get_gateway
from zargon_web.api.pages.common import attempt, fetch, form_data, validated
from zargon_web.api.templating import redirect, render
from zargon_web.schemas.forms import checkbox
from zargon_web.schemas.users import (
    ActivityFilter,
    ProfileForm,
    StaffForm,
    StaffPasswordForm,
)
from zargon_web.services.dashboard_gateway import DashboardGateway
from zargon_web.services.session_auth import USER_KEY, require_admin

router = APIRouter(prefix="/dashboard/admin", tags=["pages"], include_in_schema=False)

ADMIN_PATH = "/dashboard/admin"


@router.get("")
async def admin_page(
    request: Request,
    user: dict = Depends(require_admin),
    gateway: DashboardGateway = Depends(get_gateway),
):
    params = request.query_params
    activity_filter = ActivityFilter(
        staff_id=params.get("staffId"),
        action=params.get("action"),
        start_date=params.get("startDate"),
        end_date=params.get("endDate"),
    )
    profile, error = await fetch(gateway.profile(), {})
    staff, staff_error = await fetch(gateway.staff(), [])
    activities, activity_error = await fetch(
        gateway.activity(activity_filter.staff_id, activity_filter.to_query()), [],
    )
    show_all = checkbox(params.get("all"))
    all_users: list[dict] = []
    if show_all:
        all_users, users_error = await fetch(gateway.all_users(), [])
        staff_error = staff_error or users_error

    return render(request, "dashboard/admin.html", {
        "profile": profile.get("user") or user,
        "staff": staff,
        "show_all": show_all,
        "all_users": all_users,
        "activities": activities,
        "activity_filter": activity_filter,
        "error": error or staff_error or activity_error,
    })


@router.post("/profile")
async def update_profile(
    request: Request,
    user: dict = Depends(require_admin),
    gateway: DashboardGateway = Depends(get_gateway),
):
    form = validated(request, ProfileForm, await form_data(request))
    if form is None:
        return redirect(ADMIN_PATH)
    ok, _ = await attempt(
        request, gateway.update_profile(form.to_payload()),
        success="Profile updated successfully",
    )
    if ok:
        request.session[USER_KEY] = {**user, "name": form.name, "email": form.email}
    return redirect(ADMIN_PATH)


@router.post("/staff")
async def create_staff(
    request: Request,
    user: dict = Depends(require_admin),
    gateway: DashboardGateway = Depends(get_gateway),
):
    form = validated(request, StaffForm, await form_data(request))
    if form is not None:
        message = (
            "Staff member created successfully" if form.password
            else "Staff member created. They will set a password at first login."
        )
        await attempt(request, gateway.create_staff(form.to_payload()), success=message)
    return redirect(ADMIN_PATH)


@router.post("/staff/{staff_id}/toggle")
async def toggle_staff(
    staff_id: str,
    request: Request,
    user: dict = Depends(require_admin),
    gateway: DashboardGateway = Depends(get_gateway),
):
    await attempt(
        request, gateway.toggle_staff_status(staff_id), success="Staff status updated",
    )
    return redirect(ADMIN_PATH)


@router.post("/staff/{staff_id}/delete")
async def delete_staff(
    staff_id: str,
    request: Request,
    user: dict = Depends(require_admin),
    gateway: DashboardGateway = Depends(get_gateway),
):
    await attempt(
        request, gateway.delete_staff(staff_id), success="Staff member deleted",
    )
    return redirect(ADMIN_PATH)


@router.post("/staff/{staff_id}/password")
async def set_staff_password(
    staff_id: str,
    request: Request,
    user: dict = Depends(require_admin),
    gateway: DashboardGateway = Depends(get_gateway),
):
    form = validated(request, StaffPasswordForm, await form_data(request))
    if form is not None:
        await attempt(
            request, gateway.set_staff_password_by_admin(staff_id, form.new_password),
            success="Staff password updated",
        )
    return redirect(ADMIN_PATH)
