"""Analytics Pages — admin analytics tabs and customer rankings.

Invariants:
    - Analytics is admin-only; customer rankings are open to every logged-in user
    - The liquidity tab reads the financial-analytics report
    - Unknown tab, period or timespan values fall back to the page defaults
"""

from fastapi import APIRouter, Depends, Request

from zargon_web.api.dependencies import get_gateway
from zargon_web.api.pages.common import fetch
from zargon_web.api.templating import render
from zargon_web.core.date_ranges import analytics_period_query
from zargon_web.core.domain_types import (
    AnalyticsPeriod,
    AnalyticsTab,
    RankingTab,
    RankingTimespan,
)
from zargon_web.services.dashboard_gateway import DashboardGateway
from zargon_web.services.session_auth import require_admin, require_user

router = APIRouter(prefix="/dashboard", tags=["pages"], include_in_schema=False)

RANKING_LISTS = {
    RankingTab.OVERALL: "overallRankings",
    RankingTab.VOLUME: "topCustomersByVolume",
    RankingTab.FREQUENCY: "topCustomersByFrequency",
}


def _choice(enum_cls, value, default):
    try:
        return enum_cls(value)
    except ValueError:
        return default


@router.get("/analytics")
async def analytics_page(
    request: Request,
    user: dict = Depends(require_admin),
    gateway: DashboardGateway = Depends(get_gateway),
):
    params = request.query_params
    tab = _choice(AnalyticsTab, params.get("tab"), AnalyticsTab.FINANCIAL)
    period = _choice(AnalyticsPeriod, params.get("period"), AnalyticsPeriod.MONTH)
    query = analytics_period_query(period, params.get("startDate"), params.get("endDate"))

    data, error = await fetch(gateway.analytics(tab.report.value, query), {})
    return render(request, "dashboard/analytics.html", {
        "tab": tab.value,
        "analytics_tabs": [t.value for t in AnalyticsTab],
        "period": period.value,
        "periods": [p.value for p in AnalyticsPeriod],
        "query": query,
        "data": data,
        "error": error,
    })


@router.get("/customer-rankings")
async def customer_rankings_page(
    request: Request,
    user: dict = Depends(require_user),
    gateway: DashboardGateway = Depends(get_gateway),
):
    params = request.query_params
    timespan = _choice(RankingTimespan, params.get("timespan"), RankingTimespan.DAYS_90)
    tab = _choice(RankingTab, params.get("tab"), RankingTab.OVERALL)

    rankings, error = await fetch(gateway.customer_rankings(timespan.value), {})
    trends = None
    phone = params.get("phone")
    if phone:
        trends, trend_error = await fetch(gateway.customer_trends(phone), None)
        error = error or trend_error

    return render(request, "dashboard/customer_rankings.html", {
        "timespan": timespan.value,
        "timespans": [t.value for t in RankingTimespan],
        "tab": tab.value,
        "ranking_tabs": [t.value for t in RankingTab],
        "customers": rankings.get(RANKING_LISTS[tab]) or [],
        "summary": rankings.get("summary") or {},
        "phone": phone,
        "trends": trends,
        "error": error,
    })
