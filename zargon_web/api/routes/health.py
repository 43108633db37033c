"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health always returns 200 if the process is up (liveness)
    - GET /health/ready returns 503 if the backend is unreachable (readiness)

Design Decisions:
    - Readiness reuses the backend's /api/auth/test endpoint, the same one
      the dashboard uses for its connectivity check
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from zargon_web.api.dependencies import get_backend_client
from zargon_web.core.errors import BackendTimeoutError, BackendUnavailableError
from zargon_web.core.proxy_routes import AUTH_TEST_PATH
from zargon_web.infrastructure.backend_client import ResilientBackendClient

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])

SERVICE_NAME = "zargon-web"
SERVICE_VERSION = "1.0.0"


@router.get("", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
    }


@router.get("/ready")
async def readiness_check(
    client: ResilientBackendClient = Depends(get_backend_client),
):
    """Readiness probe — includes backend connectivity."""
    try:
        response = await client.request("GET", AUTH_TEST_PATH)
        backend_ok = response.is_success
    except (BackendUnavailableError, BackendTimeoutError) as e:
        logger.warning(f"Readiness probe failed: {e.message}")
        backend_ok = False
    if not backend_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "backend_unavailable",
            },
        )
    return {"status": "ready", "checks": {"backend": "healthy"}}
