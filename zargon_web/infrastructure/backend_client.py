"""Resilient Backend Client — wraps httpx.AsyncClient with retry, backoff, and error mapping.

Invariants:
    - Idempotent methods (GET, HEAD, OPTIONS) retry on connection errors and 502/503/504
    - Non-idempotent methods are sent exactly once
    - Timeouts map to BackendTimeoutError; connection failures after retries to
      BackendUnavailableError (core/errors.py)
    - Non-2xx responses are returned, never raised
    - Authorization header sent only when the caller has one

Design Decisions:
    - Wrapper over raw client: proxy and dashboard share one retry policy
    - ±25% jitter on backoff: avoids synchronized retries against a restarting backend
    - transport injectable so tests swap in httpx.MockTransport
"""

import asyncio
import logging
import random
import time
from typing import Any

import httpx

from zargon_web.core.errors import (
    BackendTimeoutError,
    BackendUnavailableError,
    ErrorContext,
)

logger = logging.getLogger(__name__)

IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})
RETRYABLE_STATUSES = frozenset({502, 503, 504})


class ResilientBackendClient:
    """Single HTTP client for every call to the backend at API_BASE_URL."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30.0,
        max_retries: int = 2,
        base_delay_ms: int = 250,
        max_delay_ms: int = 4_000,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            transport=transport,
        )
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms

    @classmethod
    def from_settings(cls, settings, transport=None) -> "ResilientBackendClient":
        return cls(
            settings.api_base_url,
            timeout_seconds=settings.backend_timeout_seconds,
            max_retries=settings.backend_max_retries,
            base_delay_ms=settings.backend_base_delay_ms,
            max_delay_ms=settings.backend_max_delay_ms,
            transport=transport,
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        authorization: str | None = None,
        params: Any = None,
        json: Any = None,
        content: bytes | None = None,
        files: Any = None,
        data: dict | None = None,
        headers: dict[str, str] | None = None,
        context: ErrorContext | None = None,
    ) -> httpx.Response:
        """Send one request, retrying transient failures for idempotent methods."""
        method = method.upper()
        ctx = context or ErrorContext()
        ctx.backend_path = ctx.backend_path or path
        ctx.method = ctx.method or method
        retryable = method in IDEMPOTENT_METHODS
        send_headers = self._build_headers(authorization, json, headers)

        for attempt in range(self.max_retries + 1):
            started = time.monotonic()
            try:
                response = await self.client.request(
                    method, path,
                    params=params,
                    json=json,
                    content=content,
                    files=files,
                    data=data,
                    headers=send_headers,
                )
            except httpx.TimeoutException as e:
                logger.error(
                    f"Backend timeout: {method} {path}",
                    extra={"method": method, "backend_path": path,
                           "attempt": attempt + 1},
                )
                raise BackendTimeoutError(context=ctx) from e
            except httpx.TransportError as e:
                if retryable and attempt < self.max_retries:
                    await self._wait_before_retry(attempt, method, path, str(e))
                    continue
                raise BackendUnavailableError(
                    str(e) or type(e).__name__, context=ctx,
                ) from e

            duration_ms = int((time.monotonic() - started) * 1000)
            if (
                retryable
                and response.status_code in RETRYABLE_STATUSES
                and attempt < self.max_retries
            ):
                await self._wait_before_retry(
                    attempt, method, path, f"status {response.status_code}",
                )
                continue

            logger.info(
                f"Backend responded {response.status_code}",
                extra={
                    "method": method,
                    "backend_path": path,
                    "status_code": response.status_code,
                    "attempt": attempt + 1,
                    "duration_ms": duration_ms,
                },
            )
            return response

        # Unreachable: the last attempt either returns or raises.
        raise BackendUnavailableError("retries exhausted", context=ctx)

    async def aclose(self) -> None:
        await self.client.aclose()

    def _build_headers(
        self, authorization: str | None, json: Any, extra: dict[str, str] | None,
    ) -> dict[str, str]:
        headers: dict[str, str] = {}
        if json is not None:
            headers["Content-Type"] = "application/json"
        if authorization:
            headers["Authorization"] = authorization
        if extra:
            headers.update(extra)
        return headers

    async def _wait_before_retry(
        self, attempt: int, method: str, path: str, reason: str,
    ) -> None:
        delay = self._backoff(attempt)
        logger.warning(
            f"Transient backend failure ({reason}), retry after {delay}ms",
            extra={"method": method, "backend_path": path, "attempt": attempt + 1},
        )
        await asyncio.sleep(delay / 1000)

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311
