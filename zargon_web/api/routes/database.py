"""Database Proxy Routes — failover status display and manual switching.

Invariants:
    - The proxy only relays; failover detection and switching live on the backend
"""

from fastapi import APIRouter, Depends, Request

from zargon_web.api.dependencies import get_backend_client
from zargon_web.core import proxy_routes as routes
from zargon_web.infrastructure.backend_client import ResilientBackendClient
from zargon_web.services.proxy import forward_request

router = APIRouter(prefix="/api/database", tags=["database"])


@router.get("/status")
async def database_status(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.DATABASE_STATUS)


@router.get("/health")
async def database_health(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.DATABASE_HEALTH)


@router.post("/switch")
async def switch_database(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    """Body ``{"target": "primary" | "mirror"}`` relayed unchanged."""
    return await forward_request(request, client, routes.DATABASE_SWITCH)


@router.post("/auto-failover")
async def enable_auto_failover(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.DATABASE_AUTO_FAILOVER)
