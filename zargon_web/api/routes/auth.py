"""Auth Proxy Routes — login, registration, staff first password, backend probe.

Invariants:
    - Login never forwards an Authorization header
    - GET /api/auth/test reports backend reachability as 502, never 500
"""

from fastapi import APIRouter, Depends, Request

from zargon_web.api.dependencies import get_backend_client
from zargon_web.core import proxy_routes as routes
from zargon_web.infrastructure.backend_client import ResilientBackendClient
from zargon_web.services.proxy import forward_request, probe_backend

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login")
async def login(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.AUTH_LOGIN)


@router.post("/register")
async def register(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.AUTH_REGISTER)


@router.post("/set-staff-password")
async def set_staff_password(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    """Staff first-login password; the backend answers with a fresh token."""
    return await forward_request(request, client, routes.AUTH_SET_STAFF_PASSWORD)


@router.get("/test")
async def test_backend(client: ResilientBackendClient = Depends(get_backend_client)):
    """Connectivity check through the proxy."""
    return await probe_backend(client)
