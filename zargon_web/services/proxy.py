"""Proxy Forwarding — relay one incoming request to the backend and map the outcome.

Invariants:
    - Authorization is forwarded verbatim when present and the route allows it
    - 2xx JSON is relayed with the backend's status; 204 stays an empty 204
    - Binary routes relay bytes with their media type and a Content-Disposition
    - Every failure goes through the route's FailurePolicy (core/proxy_policy.py)
    - Nothing about the request is validated except that a JSON body parses

Design Decisions:
    - forward() takes plain values so the dashboard can reuse it with the
      session token; forward_request() only extracts those values from a Request
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse, Response
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException

from zargon_web.core.errors import (
    BackendTimeoutError,
    BackendUnavailableError,
    ErrorContext,
)
from zargon_web.core.proxy_policy import (
    BodyKind,
    ProxyRoute,
    map_backend_failure,
    map_transport_failure,
)
from zargon_web.core.proxy_routes import AUTH_TEST_PATH
from zargon_web.infrastructure.backend_client import ResilientBackendClient

logger = logging.getLogger(__name__)


class _RequestBodyError(Exception):
    """Incoming request body could not be read as the route expects."""


async def forward(
    client: ResilientBackendClient,
    route: ProxyRoute,
    *,
    authorization: str | None = None,
    query: Any = None,
    json_body: Any = None,
    files: Any = None,
    data: dict | None = None,
    path_params: dict[str, str] | None = None,
) -> Response:
    """Call the backend for ``route`` and build the client response."""
    backend_path = route.backend_url_path(**(path_params or {}))
    auth = authorization if route.forward_auth else None
    logger.info(
        f"Forwarding {route.name} to backend",
        extra={
            "route": route.name,
            "method": route.method,
            "backend_path": backend_path,
            "has_auth": bool(auth),
        },
    )

    try:
        response = await client.request(
            route.method,
            backend_path,
            authorization=auth,
            params=query or None,
            json=json_body,
            files=files,
            data=data,
            context=ErrorContext(backend_path=backend_path, method=route.method),
        )
    except (BackendUnavailableError, BackendTimeoutError) as e:
        logger.error(
            f"Transport failure forwarding {route.name}: {e.message}",
            exc_info=True,
            extra={"route": route.name, "error_code": e.code},
        )
        return transport_failure(route, str(e.__cause__ or e.message))

    if response.status_code == 204:
        return Response(status_code=204)

    if response.is_success:
        if route.binary is not None:
            disposition = route.binary.content_disposition(
                response.headers.get("content-disposition"),
            )
            return Response(
                content=response.content,
                status_code=response.status_code,
                media_type=route.binary.media_type,
                headers={"Content-Disposition": disposition},
            )
        try:
            payload = response.json()
        except ValueError as e:
            logger.error(
                f"Backend returned non-JSON body for {route.name}",
                extra={"route": route.name, "status_code": response.status_code},
            )
            return transport_failure(route, f"Invalid JSON from backend: {e}")
        return JSONResponse(payload, status_code=response.status_code)

    text = response.text
    logger.warning(
        f"Backend error for {route.name}: {text[:500]}",
        extra={"route": route.name, "status_code": response.status_code},
    )
    status_code, body = map_backend_failure(route, response.status_code, text)
    return JSONResponse(body, status_code=status_code)


def transport_failure(route: ProxyRoute, detail: str) -> JSONResponse:
    status_code, body = map_transport_failure(route, detail)
    return JSONResponse(body, status_code=status_code)


async def forward_request(
    request: Request,
    client: ResilientBackendClient,
    route: ProxyRoute,
    **path_params: str,
) -> Response:
    """Forward an incoming FastAPI request along ``route``."""
    query = request.url.query if route.forward_query else None
    try:
        json_body, files, data = await _read_body(request, route)
    except _RequestBodyError as e:
        logger.error(
            f"Unreadable request body for {route.name}: {e}",
            extra={"route": route.name},
        )
        return transport_failure(route, str(e))
    return await forward(
        client, route,
        authorization=request.headers.get("authorization"),
        query=query,
        json_body=json_body,
        files=files,
        data=data,
        path_params=path_params,
    )


async def _read_body(
    request: Request, route: ProxyRoute,
) -> tuple[Any, list | None, dict | None]:
    """Returns (json_body, files, data) for the route's body kind."""
    if route.body is BodyKind.JSON:
        raw = await request.body()
        if not raw.strip():
            return None, None, None
        try:
            return json.loads(raw), None, None
        except ValueError as e:
            raise _RequestBodyError(str(e)) from e

    if route.body is BodyKind.MULTIPART:
        try:
            form = await request.form()
        except (StarletteHTTPException, ValueError) as e:
            raise _RequestBodyError(str(getattr(e, "detail", e))) from e
        files: list = []
        data: dict = {}
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                files.append(
                    (key, (value.filename, await value.read(), value.content_type)),
                )
            else:
                data[key] = value
        return None, files or None, data or None

    return None, None, None


async def probe_backend(client: ResilientBackendClient) -> JSONResponse:
    """Connectivity check against the backend's test endpoint."""
    try:
        response = await client.request("GET", AUTH_TEST_PATH)
    except (BackendUnavailableError, BackendTimeoutError) as e:
        logger.error(f"Backend probe failed: {e.message}")
        return JSONResponse(
            {"error": "Cannot reach backend", "message": str(e.__cause__ or e.message)},
            status_code=502,
        )

    if not response.is_success:
        return JSONResponse(
            {"error": "Backend not reachable", "status": response.status_code},
            status_code=502,
        )
    try:
        data = response.json()
    except ValueError as e:
        return JSONResponse(
            {"error": "Cannot reach backend", "message": str(e)},
            status_code=502,
        )
    if not isinstance(data, dict):
        data = {"backend": data}
    return JSONResponse({
        **data,
        "proxy": "working",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    })
