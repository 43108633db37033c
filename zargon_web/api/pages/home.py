"""Home Page — greeting, quick links, report overview and low-stock list."""

from fastapi import APIRouter, Depends, Request

from zargon_web.api.dependencies import get_gateway
from zargon_web.api.pages.common import fetch
from zargon_web.api.templating import render
from zargon_web.services.dashboard_gateway import DashboardGateway
from zargon_web.services.session_auth import require_user

router = APIRouter(tags=["pages"], include_in_schema=False)

LOW_STOCK_PREVIEW = 5


@router.get("/")
async def home(
    request: Request,
    user: dict = Depends(require_user),
    gateway: DashboardGateway = Depends(get_gateway),
):
    report, error = await fetch(gateway.reports(), {})
    overview = report.get("overview") or {}
    low_stock = report.get("lowStockItems") or []
    return render(request, "home.html", {
        "overview": overview,
        "low_stock": low_stock[:LOW_STOCK_PREVIEW],
        "low_stock_total": len(low_stock),
        "error": error,
    })
