"""Notices Page — notice management plus the banner shown on every dashboard page.

Invariants:
    - Only admins create, edit, toggle or delete notices; staff read the list
    - The banner lists active, unexpired, undismissed notices, most urgent first
    - Dismissal lasts for the session only
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request

from zargon_web.api.dependencies import get_gateway
from zargon_web.api.pages.common import attempt, fetch, find_by_id, form_data, validated
from zargon_web.api.templating import redirect, render, safe_return
from zargon_web.core.domain_types import NoticePriority
from zargon_web.core.formatting import NOTICE_PRIORITY_ORDER, parse_timestamp
from zargon_web.schemas.notices import NoticeForm
from zargon_web.services.dashboard_gateway import DashboardGateway
from zargon_web.services.session_auth import (
    dismiss_notice,
    dismissed_notices,
    flash,
    require_admin,
    require_user,
)

router = APIRouter(prefix="/dashboard/notices", tags=["pages"], include_in_schema=False)

NOTICES_PATH = "/dashboard/notices"


def banner_notices(
    notices: list[dict], dismissed: set[str], now: datetime | None = None,
) -> list[dict]:
    """Notices for the banner, ordered urgent, high, medium, low."""
    now = now or datetime.now(timezone.utc)
    visible = []
    for notice in notices:
        if not notice.get("isActive", True):
            continue
        if str(notice.get("_id")) in dismissed:
            continue
        expires = parse_timestamp(notice.get("expiresAt"))
        if expires is not None and expires <= now:
            continue
        visible.append(notice)
    return sorted(
        visible,
        key=lambda n: NOTICE_PRIORITY_ORDER.get(n.get("priority"), len(NOTICE_PRIORITY_ORDER)),
    )


@router.get("")
async def notices_page(
    request: Request,
    user: dict = Depends(require_user),
    gateway: DashboardGateway = Depends(get_gateway),
):
    notices, error = await fetch(gateway.list_notices(), [])
    edit_id = request.query_params.get("edit")
    return render(request, "dashboard/notices.html", {
        "notices": notices,
        "editing": find_by_id(notices, edit_id) if edit_id else None,
        "priorities": [p.value for p in NoticePriority],
        "error": error,
    })


@router.get("/banner")
async def notice_banner(
    request: Request,
    user: dict = Depends(require_user),
    gateway: DashboardGateway = Depends(get_gateway),
):
    notices, _ = await fetch(gateway.list_notices(), [])
    return render(request, "partials/notice_banner.html", {
        "notices": banner_notices(notices, dismissed_notices(request)),
    })


@router.post("")
async def create_notice(
    request: Request,
    user: dict = Depends(require_admin),
    gateway: DashboardGateway = Depends(get_gateway),
):
    form = await form_data(request)
    notice = validated(request, NoticeForm, form)
    if notice is not None:
        await attempt(
            request, gateway.create_notice(notice.to_payload()),
            success="Notice created successfully",
        )
    return redirect(NOTICES_PATH)


@router.post("/{notice_id}")
async def update_notice(
    notice_id: str,
    request: Request,
    user: dict = Depends(require_admin),
    gateway: DashboardGateway = Depends(get_gateway),
):
    form = await form_data(request)
    notice = validated(request, NoticeForm, form)
    if notice is not None:
        await attempt(
            request, gateway.update_notice(notice_id, notice.to_payload()),
            success="Notice updated successfully",
        )
    return redirect(NOTICES_PATH)


@router.post("/{notice_id}/toggle")
async def toggle_notice(
    notice_id: str,
    request: Request,
    user: dict = Depends(require_admin),
    gateway: DashboardGateway = Depends(get_gateway),
):
    notices, error = await fetch(gateway.list_notices(), [])
    notice = find_by_id(notices, notice_id)
    if notice is None:
        flash(request, error or "Notice not found", "error")
        return redirect(NOTICES_PATH)
    active = not notice.get("isActive", True)
    payload = {
        "title": notice.get("title"),
        "message": notice.get("message"),
        "priority": notice.get("priority"),
        "isActive": active,
        "expiresAt": notice.get("expiresAt"),
    }
    await attempt(
        request, gateway.update_notice(notice_id, payload),
        success="Notice activated" if active else "Notice deactivated",
    )
    return redirect(NOTICES_PATH)


@router.post("/{notice_id}/delete")
async def delete_notice(
    notice_id: str,
    request: Request,
    user: dict = Depends(require_admin),
    gateway: DashboardGateway = Depends(get_gateway),
):
    await attempt(
        request, gateway.delete_notice(notice_id), success="Notice deleted successfully",
    )
    return redirect(NOTICES_PATH)


@router.post("/{notice_id}/dismiss")
async def dismiss(
    notice_id: str,
    request: Request,
    user: dict = Depends(require_user),
):
    form = await form_data(request)
    dismiss_notice(request, notice_id)
    return redirect(safe_return(form.get("return_to"), "/dashboard"))
