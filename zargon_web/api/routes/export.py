"""File Export Proxy Routes — inventory and order downloads (Excel, PDF)."""

from fastapi import APIRouter, Depends, Request

from zargon_web.api.dependencies import get_backend_client
from zargon_web.core import proxy_routes as routes
from zargon_web.infrastructure.backend_client import ResilientBackendClient
from zargon_web.services.proxy import forward_request

router = APIRouter(prefix="/api/export", tags=["export"])


@router.get("/inventory/excel")
async def export_inventory_excel(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.EXPORT_INVENTORY_EXCEL)


@router.get("/inventory/pdf")
async def export_inventory_pdf(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.EXPORT_INVENTORY_PDF)


@router.get("/orders/excel")
async def export_orders_excel(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.EXPORT_ORDERS_EXCEL)


@router.get("/orders/pdf")
async def export_orders_pdf(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.EXPORT_ORDERS_PDF)
