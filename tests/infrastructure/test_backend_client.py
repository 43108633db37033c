"""Resilient backend client tests — retries, error mapping and headers.

Invariants:
    - GET retries connection errors and 502/503/504, then gives up
    - POST is sent exactly once
    - Timeouts are never retried
    - Authorization only appears when provided

Tests cover:
    - Transient failure then success
    - Retry exhaustion for status and transport failures
    - Non-2xx returned, not raised
    - Backoff bounds
"""

import httpx
import pytest

from zargon_web.core.errors import BackendTimeoutError, BackendUnavailableError
from zargon_web.infrastructure.backend_client import ResilientBackendClient


def _client(handler, max_retries=2):
    return ResilientBackendClient(
        "http://backend.test",
        max_retries=max_retries,
        base_delay_ms=0,
        max_delay_ms=0,
        transport=httpx.MockTransport(handler),
    )


class _Sequence:
    """Handler answering from a list of responses/exceptions, recording calls."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls: list[httpx.Request] = []

    def __call__(self, request):
        self.calls.append(request)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


# --- Retries ---

async def test_get_retries_connection_error_then_succeeds():
    handler = _Sequence(
        httpx.ConnectError("refused"), httpx.Response(200, json={"ok": True}),
    )
    client = _client(handler)
    res = await client.request("GET", "/api/reports")
    assert res.status_code == 200
    assert len(handler.calls) == 2
    await client.aclose()


async def test_get_retries_503_until_exhausted_and_returns_last():
    handler = _Sequence(httpx.Response(503, json={"error": "down"}))
    client = _client(handler, max_retries=2)
    res = await client.request("GET", "/api/reports")
    assert res.status_code == 503
    assert len(handler.calls) == 3
    await client.aclose()


async def test_get_connection_errors_exhausted_raise_unavailable():
    handler = _Sequence(httpx.ConnectError("refused"))
    client = _client(handler, max_retries=1)
    with pytest.raises(BackendUnavailableError) as exc:
        await client.request("GET", "/api/orders")
    assert exc.value.context.backend_path == "/api/orders"
    assert exc.value.context.method == "GET"
    assert len(handler.calls) == 2
    await client.aclose()


async def test_post_is_never_retried():
    handler = _Sequence(httpx.ConnectError("refused"))
    client = _client(handler)
    with pytest.raises(BackendUnavailableError):
        await client.request("POST", "/api/orders", json={})
    assert len(handler.calls) == 1
    await client.aclose()


async def test_post_503_is_returned_without_retry():
    handler = _Sequence(httpx.Response(503))
    client = _client(handler)
    res = await client.request("POST", "/api/backup/create", json={"type": "full"})
    assert res.status_code == 503
    assert len(handler.calls) == 1
    await client.aclose()


async def test_timeout_maps_to_timeout_error_without_retry():
    handler = _Sequence(httpx.ReadTimeout("slow"))
    client = _client(handler)
    with pytest.raises(BackendTimeoutError):
        await client.request("GET", "/api/analytics/abc-analysis")
    assert len(handler.calls) == 1
    await client.aclose()


async def test_non_2xx_is_returned_not_raised():
    handler = _Sequence(httpx.Response(404, json={"error": "missing"}))
    client = _client(handler)
    res = await client.request("GET", "/api/inventory/x")
    assert res.status_code == 404
    assert len(handler.calls) == 1
    await client.aclose()


# --- Headers ---

async def test_authorization_forwarded_when_present():
    handler = _Sequence(httpx.Response(200, json={}))
    client = _client(handler)
    await client.request("GET", "/api/orders", authorization="Bearer abc")
    assert handler.calls[0].headers["authorization"] == "Bearer abc"
    await client.aclose()


async def test_no_authorization_header_when_absent():
    handler = _Sequence(httpx.Response(200, json={}))
    client = _client(handler)
    await client.request("GET", "/api/orders")
    assert "authorization" not in handler.calls[0].headers
    await client.aclose()


async def test_json_body_sets_content_type():
    handler = _Sequence(httpx.Response(201, json={}))
    client = _client(handler)
    await client.request("POST", "/api/notices", json={"title": "Hi"})
    assert handler.calls[0].headers["content-type"] == "application/json"
    await client.aclose()


# --- Backoff ---

def test_backoff_is_capped_with_jitter():
    client = ResilientBackendClient(
        "http://backend.test", base_delay_ms=100, max_delay_ms=1000,
    )
    for _ in range(20):
        assert 75 <= client._backoff(0) <= 125
        assert 750 <= client._backoff(5) <= 1250
