"""Analytics Proxy Routes — customer rankings and per-type analytics reports.

Invariants:
    - customer-rankings routes are declared before /{report_type}, otherwise
      "customer-rankings" would be taken as an analytics type
    - Any analytics type is relayed; the backend decides which are valid
"""

from fastapi import APIRouter, Depends, Request

from zargon_web.api.dependencies import get_backend_client
from zargon_web.core import proxy_routes as routes
from zargon_web.infrastructure.backend_client import ResilientBackendClient
from zargon_web.services.proxy import forward_request

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get("/customer-rankings")
async def customer_rankings(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    """Backend serves this at /api/customer-rankings."""
    return await forward_request(request, client, routes.CUSTOMER_RANKINGS)


@router.get("/customer-rankings/{phone}/trends")
async def customer_trends(
    phone: str,
    request: Request,
    client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(
        request, client, routes.CUSTOMER_RANKING_TRENDS, phone=phone,
    )


@router.get("/{report_type}")
async def analytics_report(
    report_type: str,
    request: Request,
    client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(
        request, client, routes.ANALYTICS_REPORT, type=report_type,
    )
