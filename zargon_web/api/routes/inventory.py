"""Inventory Proxy Routes — stock CRUD and product image management."""

from fastapi import APIRouter, Depends, Request

from zargon_web.api.dependencies import get_backend_client
from zargon_web.core import proxy_routes as routes
from zargon_web.infrastructure.backend_client import ResilientBackendClient
from zargon_web.services.proxy import forward_request

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


@router.get("")
async def list_inventory(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    """Paginated stock list; filters pass through in the query string."""
    return await forward_request(request, client, routes.INVENTORY_LIST)


@router.post("")
async def create_inventory_item(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.INVENTORY_CREATE)


@router.patch("/{item_id}")
async def update_inventory_item(
    item_id: str,
    request: Request,
    client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.INVENTORY_UPDATE, id=item_id)


@router.delete("/{item_id}")
async def delete_inventory_item(
    item_id: str,
    request: Request,
    client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.INVENTORY_DELETE, id=item_id)


@router.post("/{item_id}/images")
async def upload_images(
    item_id: str,
    request: Request,
    client: ResilientBackendClient = Depends(get_backend_client),
):
    """Multipart upload relayed as-is to the backend."""
    return await forward_request(
        request, client, routes.INVENTORY_IMAGES_UPLOAD, id=item_id,
    )


@router.delete("/{item_id}/images")
async def remove_image(
    item_id: str,
    request: Request,
    client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(
        request, client, routes.INVENTORY_IMAGES_DELETE, id=item_id,
    )
