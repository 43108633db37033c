"""User & Staff Proxy Routes — profile, staff management and activity reports.

Invariants:
    - /staff and /all are declared before any parametrised staff route
    - Staff routes relay the backend's own error bodies (PASSTHROUGH)
"""

from fastapi import APIRouter, Depends, Request

from zargon_web.api.dependencies import get_backend_client
from zargon_web.core import proxy_routes as routes
from zargon_web.infrastructure.backend_client import ResilientBackendClient
from zargon_web.services.proxy import forward_request

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("")
async def list_users(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.USERS_LIST)


@router.post("")
async def create_user(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.USERS_CREATE)


@router.get("/all")
async def list_all_users(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.USERS_ALL)


@router.get("/profile")
async def get_profile(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.USERS_PROFILE)


@router.put("/profile")
async def update_profile(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.USERS_PROFILE_UPDATE)


@router.get("/activity")
async def activity_report(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    """Activity log; staffId/action/startDate/endDate pass through as query."""
    return await forward_request(request, client, routes.USERS_ACTIVITY)


# --- Staff ---

@router.get("/staff")
async def list_staff(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.STAFF_LIST)


@router.post("/staff")
async def create_staff(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.STAFF_CREATE)


@router.get("/staff/{staff_id}/activity")
async def staff_activity(
    staff_id: str,
    request: Request,
    client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.STAFF_ACTIVITY, id=staff_id)


@router.put("/staff/{staff_id}/password")
async def set_staff_password(
    staff_id: str,
    request: Request,
    client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.STAFF_PASSWORD, id=staff_id)


@router.put("/staff/{staff_id}/toggle-status")
async def toggle_staff_status(
    staff_id: str,
    request: Request,
    client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(
        request, client, routes.STAFF_TOGGLE_STATUS, id=staff_id,
    )


@router.delete("/staff/{staff_id}")
async def delete_staff(
    staff_id: str,
    request: Request,
    client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.STAFF_DELETE, id=staff_id)
