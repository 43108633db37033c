"""Backup & Database Page — backup manager and database failover panel (admin).

Invariants:
    - Both panels are HTML fragments polled on their own intervals
    - The page only displays and triggers; backups and failover run on the backend
    - Restores and database switches require an explicit confirmation field
"""

from fastapi import APIRouter, Depends, Request

from zargon_web.api.dependencies import get_gateway
from zargon_web.api.pages.common import attempt, fetch, form_data, validated
from zargon_web.api.templating import redirect, render
from zargon_web.core.domain_types import BackupType, DatabaseTarget
from zargon_web.schemas.backup import BackupForm, RestoreForm, SwitchDatabaseForm
from zargon_web.schemas.forms import checkbox
from zargon_web.services.dashboard_gateway import DashboardGateway
from zargon_web.services.session_auth import flash, require_admin

router = APIRouter(prefix="/dashboard", tags=["pages"], include_in_schema=False)

BACKUP_PATH = "/dashboard/backup"


def health_summary(health: dict) -> str:
    """One-line database health check result for a flash message."""
    parts = []
    for name in (DatabaseTarget.PRIMARY.value, DatabaseTarget.MIRROR.value):
        node = health.get(name) or {}
        if node.get("available"):
            ping = node.get("ping")
            parts.append(f"{name.title()}: available" + (f" ({ping}ms)" if ping is not None else ""))
        else:
            reason = node.get("error") or "unavailable"
            parts.append(f"{name.title()}: {reason}")
    return ", ".join(parts)


@router.get("/backup")
async def backup_page(request: Request, user: dict = Depends(require_admin)):
    return render(request, "dashboard/backup.html", {
        "backup_types": [t.value for t in BackupType],
        "targets": [t.value for t in DatabaseTarget],
    })


@router.get("/backup/panel")
async def backup_panel(
    request: Request,
    user: dict = Depends(require_admin),
    gateway: DashboardGateway = Depends(get_gateway),
):
    status, error = await fetch(gateway.backup_status(), {})
    health, health_error = await fetch(gateway.backup_health(), {})
    return render(request, "partials/backup_panel.html", {
        "status": status,
        "health": health,
        "error": error or status.get("error") or health_error,
    })


@router.get("/database/panel")
async def database_panel(
    request: Request,
    user: dict = Depends(require_admin),
    gateway: DashboardGateway = Depends(get_gateway),
):
    result, error = await fetch(gateway.database_status(), {})
    return render(request, "partials/database_panel.html", {
        "status": result.get("status") or {},
        "health": result.get("health") or {},
        "targets": [t.value for t in DatabaseTarget],
        "error": error,
    })


@router.post("/backup/create")
async def create_backup(
    request: Request,
    user: dict = Depends(require_admin),
    gateway: DashboardGateway = Depends(get_gateway),
):
    form = validated(request, BackupForm, await form_data(request))
    if form is not None:
        await attempt(
            request, gateway.create_backup(form.type),
            success=f"{form.type.value.title()} backup created successfully",
        )
    return redirect(BACKUP_PATH)


@router.post("/backup/restore")
async def restore_backup(
    request: Request,
    user: dict = Depends(require_admin),
    gateway: DashboardGateway = Depends(get_gateway),
):
    data = await form_data(request)
    if not checkbox(data.get("confirm")):
        flash(request, "Please confirm the restore. It replaces the current data.", "error")
        return redirect(BACKUP_PATH)
    form = validated(request, RestoreForm, data)
    if form is not None:
        await attempt(
            request, gateway.restore_backup(form.file_name),
            success=f"Database restored from {form.file_name}",
        )
    return redirect(BACKUP_PATH)


@router.post("/database/switch")
async def switch_database(
    request: Request,
    user: dict = Depends(require_admin),
    gateway: DashboardGateway = Depends(get_gateway),
):
    data = await form_data(request)
    if not checkbox(data.get("confirm")):
        flash(request, "Please confirm the database switch.", "error")
        return redirect(BACKUP_PATH)
    form = validated(request, SwitchDatabaseForm, data)
    if form is None:
        return redirect(BACKUP_PATH)
    ok, result = await attempt(request, gateway.switch_database(form.target))
    if ok:
        result = result or {}
        default = f"Switched to {form.target.value} database"
        if result.get("success") is False:
            flash(request, result.get("message") or "Failed to switch database", "error")
        else:
            flash(request, result.get("message") or default, "success")
    return redirect(BACKUP_PATH)


@router.post("/database/auto-failover")
async def enable_auto_failover(
    request: Request,
    user: dict = Depends(require_admin),
    gateway: DashboardGateway = Depends(get_gateway),
):
    await attempt(
        request, gateway.enable_auto_failover(), success="Automatic failover enabled",
    )
    return redirect(BACKUP_PATH)


@router.post("/database/health-check")
async def database_health_check(
    request: Request,
    user: dict = Depends(require_admin),
    gateway: DashboardGateway = Depends(get_gateway),
):
    ok, health = await attempt(request, gateway.database_health())
    if ok:
        flash(request, f"Health check: {health_summary(health or {})}", "info")
    return redirect(BACKUP_PATH)
