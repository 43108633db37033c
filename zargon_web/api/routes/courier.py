"""Courier Proxy Routes — dispatch orders and look up delivery status."""

from fastapi import APIRouter, Depends, Request

from zargon_web.api.dependencies import get_backend_client
from zargon_web.core import proxy_routes as routes
from zargon_web.infrastructure.backend_client import ResilientBackendClient
from zargon_web.services.proxy import forward_request

router = APIRouter(prefix="/api/courier", tags=["courier"])


@router.post("/create-order")
async def create_courier_order(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.COURIER_CREATE_ORDER)


@router.post("/bulk-order")
async def create_bulk_courier_order(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.COURIER_BULK_ORDER)


@router.get("/status/consignment/{consignment_id}")
async def status_by_consignment(
    consignment_id: str,
    request: Request,
    client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(
        request, client, routes.COURIER_STATUS_CONSIGNMENT,
        consignment_id=consignment_id,
    )


@router.get("/status/invoice/{invoice}")
async def status_by_invoice(
    invoice: str,
    request: Request,
    client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(
        request, client, routes.COURIER_STATUS_INVOICE, invoice=invoice,
    )


@router.get("/status/tracking/{tracking_code}")
async def status_by_tracking(
    tracking_code: str,
    request: Request,
    client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(
        request, client, routes.COURIER_STATUS_TRACKING, tracking_code=tracking_code,
    )
