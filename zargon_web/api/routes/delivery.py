"""Delivery Voucher Proxy Routes — selection toggle, clear and export.

Invariants:
    - Export format is one of json, excel, csv; anything else falls back to json
    - excel and csv exports are relayed as file downloads
"""

from fastapi import APIRouter, Depends, Query, Request

from zargon_web.api.dependencies import get_backend_client
from zargon_web.core import proxy_routes as routes
from zargon_web.core.domain_types import DeliveryExportFormat
from zargon_web.infrastructure.backend_client import ResilientBackendClient
from zargon_web.services.proxy import forward, forward_request

router = APIRouter(prefix="/api/delivery", tags=["delivery"])


@router.patch("/{order_id}/toggle")
async def toggle_delivery(
    order_id: str,
    request: Request,
    client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.DELIVERY_TOGGLE, id=order_id)


@router.post("/clear")
async def clear_delivery(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.DELIVERY_CLEAR)


@router.get("/export")
async def export_delivery(
    request: Request,
    format: str = Query(DeliveryExportFormat.JSON.value),
    client: ResilientBackendClient = Depends(get_backend_client),
):
    fmt = format if format in routes.DELIVERY_EXPORT_ROUTES else DeliveryExportFormat.JSON.value
    return await forward(
        client, routes.DELIVERY_EXPORT_ROUTES[fmt],
        authorization=request.headers.get("authorization"),
        query={"format": fmt},
    )
