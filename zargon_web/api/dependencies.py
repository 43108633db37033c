"""API Dependencies — per-request access to the shared backend client.

Invariants:
    - One ResilientBackendClient per process, created in the lifespan
    - Tests override get_backend_client to inject an httpx.MockTransport backend
"""

from fastapi import Depends, Request

from zargon_web.infrastructure.backend_client import ResilientBackendClient
from zargon_web.services.dashboard_gateway import DashboardGateway
from zargon_web.services.session_auth import current_token


def get_backend_client(request: Request) -> ResilientBackendClient:
    return request.app.state.backend_client


def get_gateway(
    request: Request,
    client: ResilientBackendClient = Depends(get_backend_client),
) -> DashboardGateway:
    """Gateway authenticated with the dashboard session's token."""
    return DashboardGateway(client, current_token(request))
