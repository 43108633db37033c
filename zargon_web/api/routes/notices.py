"""Notice Proxy Routes — every failure answers 500 with a fixed message (STRICT)."""

from fastapi import APIRouter, Depends, Request

from zargon_web.api.dependencies import get_backend_client
from zargon_web.core import proxy_routes as routes
from zargon_web.infrastructure.backend_client import ResilientBackendClient
from zargon_web.services.proxy import forward_request

router = APIRouter(prefix="/api/notices", tags=["notices"])


@router.get("")
async def list_notices(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.NOTICES_LIST)


@router.post("")
async def create_notice(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.NOTICES_CREATE)


@router.put("/{notice_id}")
async def update_notice(
    notice_id: str,
    request: Request,
    client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.NOTICES_UPDATE, id=notice_id)


@router.delete("/{notice_id}")
async def delete_notice(
    notice_id: str,
    request: Request,
    client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.NOTICES_DELETE, id=notice_id)
