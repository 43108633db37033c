"""Backup Proxy Routes — status, health, create and restore.

Invariants:
    - Backend failures come back as 200 with ``disabled: true`` (SOFT) so the
      backup panel can show why backups are unavailable
"""

from fastapi import APIRouter, Depends, Request

from zargon_web.api.dependencies import get_backend_client
from zargon_web.core import proxy_routes as routes
from zargon_web.infrastructure.backend_client import ResilientBackendClient
from zargon_web.services.proxy import forward_request

router = APIRouter(prefix="/api/backup", tags=["backup"])


@router.get("/status")
async def backup_status(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.BACKUP_STATUS)


@router.get("/health")
async def backup_health(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.BACKUP_HEALTH)


@router.post("/create")
async def create_backup(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.BACKUP_CREATE)


@router.post("/restore")
async def restore_backup(
    request: Request, client: ResilientBackendClient = Depends(get_backend_client),
):
    return await forward_request(request, client, routes.BACKUP_RESTORE)
