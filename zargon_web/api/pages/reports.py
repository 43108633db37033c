"""Reports Page — sales overview, status breakdown, top sellers and live alerts.

Invariants:
    - The alerts panel is an HTML fragment polled every alerts_poll_seconds
    - A failing alerts call renders an inline error inside the panel only
"""

from fastapi import APIRouter, Depends, Request

from zargon_web.api.dependencies import get_gateway
from zargon_web.api.pages.common import fetch
from zargon_web.api.templating import render
from zargon_web.services.dashboard_gateway import DashboardGateway
from zargon_web.services.session_auth import require_user

router = APIRouter(prefix="/dashboard/reports", tags=["pages"], include_in_schema=False)


@router.get("")
async def reports_page(
    request: Request,
    user: dict = Depends(require_user),
    gateway: DashboardGateway = Depends(get_gateway),
):
    report, error = await fetch(gateway.reports(), {})
    return render(request, "dashboard/reports.html", {
        "overview": report.get("overview") or {},
        "status_breakdown": report.get("statusBreakdown") or [],
        "recent_activity": report.get("recentActivity") or [],
        "top_selling": report.get("topSellingProducts") or [],
        "low_stock": report.get("lowStockItems") or [],
        "out_of_stock": report.get("outOfStockItems") or [],
        "error": error,
    })


@router.get("/alerts")
async def alerts_fragment(
    request: Request,
    user: dict = Depends(require_user),
    gateway: DashboardGateway = Depends(get_gateway),
):
    result, error = await fetch(gateway.alerts(), {})
    return render(request, "partials/alerts.html", {
        "alerts": result.get("alerts") or [],
        "summary": result.get("summary") or {},
        "last_checked": result.get("lastChecked"),
        "error": error,
    })
