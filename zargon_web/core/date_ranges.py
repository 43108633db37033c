"""Date Ranges — turn dashboard range presets into backend query parameters.

Invariants:
    - Preset ranges always end today and use ISO dates (YYYY-MM-DD)
    - Custom ranges pass user dates through untouched; blanks are dropped
    - Page filters with empty or "all" values never reach the backend query
"""

from datetime import date, timedelta
from typing import Any, Mapping

from zargon_web.core.domain_types import AnalyticsPeriod, ExportRange

EXPORT_RANGE_DAYS = {
    ExportRange.WEEK: 7,
    ExportRange.MONTH: 30,
}

ANALYTICS_PERIOD_DAYS = {
    AnalyticsPeriod.WEEK: 7,
    AnalyticsPeriod.MONTH: 30,
    AnalyticsPeriod.QUARTER: 90,
    AnalyticsPeriod.YEAR: 365,
}


def _trailing(days: int, today: date) -> tuple[str, str]:
    return (today - timedelta(days=days)).isoformat(), today.isoformat()


def export_date_range(
    range_: ExportRange,
    date_from: str | None = None,
    date_to: str | None = None,
    today: date | None = None,
) -> dict[str, str]:
    """``dateFrom``/``dateTo`` for an export preset."""
    today = today or date.today()
    if range_ is ExportRange.CUSTOM:
        params = {"dateFrom": date_from, "dateTo": date_to}
        return {k: v for k, v in params.items() if v}
    start, end = _trailing(EXPORT_RANGE_DAYS[range_], today)
    return {"dateFrom": start, "dateTo": end}


def export_query(
    range_: ExportRange,
    page_filters: Mapping[str, Any] | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
    today: date | None = None,
) -> dict[str, str]:
    """Full export query: date range first, then the page's active filters."""
    query = export_date_range(range_, date_from, date_to, today)
    for key, value in (page_filters or {}).items():
        if key in query or value in (None, "", "all"):
            continue
        query[key] = str(value)
    return query


def analytics_period_query(
    period: AnalyticsPeriod,
    start_date: str | None = None,
    end_date: str | None = None,
    today: date | None = None,
) -> dict[str, str]:
    """``startDate``/``endDate``/``period`` for the analytics filter.

    Custom periods without both dates fall back to the trailing 30 days,
    which is also what the page shows on first load.
    """
    today = today or date.today()
    if period is AnalyticsPeriod.CUSTOM and start_date and end_date:
        start, end = start_date, end_date
    else:
        days = ANALYTICS_PERIOD_DAYS.get(period, 30)
        start, end = _trailing(days, today)
    return {"startDate": start, "endDate": end, "period": period.value}
