"""Order Proxy Routes — order CRUD, status changes and manual status overrides.

Invariants:
    - Fixed paths (manual-overrides) are declared before /{order_id} routes
    - Order creation relays the backend's own error body (PASSTHROUGH)
"""

from fastapi import APIRouter, Depends, Request

from zargon_web.api.dependencies import get_backend_client
from zargon_web.core import proxy_routes as routes
from zargon_web.infrastructure.backend_client import ResilientBackendClient
from zargon_web.services.proxy import forward_request

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("")
async def list_orders(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.ORDERS_LIST)


@router.post("")
async def create_order(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.ORDERS_CREATE)


@router.get("/manual-overrides")
async def list_manual_overrides(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.ORDERS_MANUAL_OVERRIDES)


@router.delete("/manual-overrides/clear-all")
async def clear_all_manual_overrides(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(
        request, client, routes.ORDERS_MANUAL_OVERRIDES_CLEAR_ALL,
    )


@router.patch("/{order_id}")
async def update_order(
    order_id: str,
    request: Request,
    client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.ORDERS_UPDATE, id=order_id)


@router.delete("/{order_id}")
async def delete_order(
    order_id: str,
    request: Request,
    client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.ORDERS_DELETE, id=order_id)


@router.patch("/{order_id}/status")
async def update_order_status(
    order_id: str,
    request: Request,
    client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.ORDERS_STATUS, id=order_id)


@router.delete("/{order_id}/manual-override")
async def clear_manual_override(
    order_id: str,
    request: Request,
    client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(
        request, client, routes.ORDERS_MANUAL_OVERRIDE_CLEAR, id=order_id,
    )
