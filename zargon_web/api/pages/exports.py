"""Dashboard Downloads — Excel/PDF exports of the current stock or order filters.

Invariants:
    - Downloads reuse services/proxy.forward with the session token, so the
      bytes and Content-Disposition are exactly what the backend produced
    - A failed export flashes the mapped proxy error and returns to the page
    - 401 from the backend ends the session like any other page call
"""

import logging

from fastapi import APIRouter, Depends, Request

from zargon_web.api.dependencies import get_backend_client
from zargon_web.api.templating import redirect, safe_return
from zargon_web.core.date_ranges import export_query
from zargon_web.core.domain_types import ExportRange
from zargon_web.core.errors import SessionExpiredError, extract_backend_message
from zargon_web.core.proxy_policy import parse_json_text
from zargon_web.core.proxy_routes import EXPORT_ROUTES
from zargon_web.infrastructure.backend_client import ResilientBackendClient
from zargon_web.services.dashboard_gateway import bearer
from zargon_web.services.proxy import forward
from zargon_web.services.session_auth import current_token, flash, require_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/dashboard/export", tags=["pages"], include_in_schema=False)

_CONTROL_KEYS = {"range", "dateFrom", "dateTo", "return_to"}
_DEFAULT_RETURN = {"inventory": "/dashboard", "orders": "/dashboard/orders"}


def failure_message(response) -> str:
    body = parse_json_text(bytes(response.body).decode("utf-8", errors="replace"))
    return extract_backend_message(body) or f"Export failed ({response.status_code})"


@router.get("/{export_type}/{export_format}")
async def download_export(
    export_type: str,
    export_format: str,
    request: Request,
    user: dict = Depends(require_user),
    client: ResilientBackendClient = Depends(get_backend_client),
):
    params = request.query_params
    back = safe_return(
        params.get("return_to"), _DEFAULT_RETURN.get(export_type, "/dashboard"),
    )
    route = EXPORT_ROUTES.get((export_type, export_format))
    if route is None:
        flash(request, f"Unsupported export: {export_type} as {export_format}", "error")
        return redirect(back)
    try:
        range_ = ExportRange(params.get("range") or ExportRange.MONTH.value)
    except ValueError:
        flash(request, "Unknown export range", "error")
        return redirect(back)
    if range_ is ExportRange.CUSTOM and not (params.get("dateFrom") and params.get("dateTo")):
        flash(request, "Please choose both start and end dates", "error")
        return redirect(back)

    page_filters = {k: v for k, v in params.items() if k not in _CONTROL_KEYS}
    query = export_query(
        range_, page_filters, params.get("dateFrom"), params.get("dateTo"),
    )
    response = await forward(
        client, route, authorization=bearer(current_token(request)), query=query,
    )
    if response.status_code == 401:
        raise SessionExpiredError()
    if response.status_code >= 400:
        flash(request, failure_message(response), "error")
        return redirect(back)
    return response
