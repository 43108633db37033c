"""Health probe tests — liveness always 200, readiness follows the backend."""

import httpx


async def test_liveness(client):
    res = await client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "healthy", "service": "zargon-web", "version": "1.0.0"}


async def test_ready_when_backend_answers(client, backend):
    backend.on("GET", "/api/auth/test", json={"message": "ok"})
    res = await client.get("/health/ready")
    assert res.status_code == 200
    assert res.json() == {"status": "ready", "checks": {"backend": "healthy"}}


async def test_not_ready_when_backend_unreachable(client, backend):
    backend.fail("GET", "/api/auth/test", httpx.ConnectError("refused"))
    res = await client.get("/health/ready")
    assert res.status_code == 503
    assert res.json() == {"status": "not_ready", "reason": "backend_unavailable"}


async def test_not_ready_when_backend_errors(client, backend):
    backend.on("GET", "/api/auth/test", status=500, json={})
    res = await client.get("/health/ready")
    assert res.status_code == 503
