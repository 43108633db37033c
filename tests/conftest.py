"""Root conftest — fake backend, app client and dashboard login helpers.

Invariants:
    - Environment is set before the app is imported (settings are cached)
    - Every test gets a fresh FakeBackend; unknown routes answer 404 unless a
      fallback answer (or failure) is set for every route
    - get_backend_client overridden with a client over httpx.MockTransport
    - Retries run with zero backoff so tests never sleep

Design Decisions:
    - The ASGI test transport does not run the lifespan, so the override is
      the only backend client the app sees
    - FakeBackend records every httpx.Request: tests assert on what the
      backend actually received (path, query, headers, body)
"""

import json
import os
from base64 import b64decode

os.environ.setdefault("API_BASE_URL", "http://backend.test")
os.environ.setdefault("SESSION_SECRET", "test-session-secret")

import httpx  # noqa: E402
import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from itsdangerous import TimestampSigner  # noqa: E402

from zargon_web.api.dependencies import get_backend_client  # noqa: E402
from zargon_web.config import get_settings  # noqa: E402
from zargon_web.infrastructure.backend_client import ResilientBackendClient  # noqa: E402
from zargon_web.main import app  # noqa: E402

BACKEND_URL = "http://backend.test"
TOKEN = "tok-123"


class FakeBackend:
    """Programmable stand-in for the backend API."""

    def __init__(self):
        self.routes = {}
        self.calls: list[httpx.Request] = []
        self.fallback = None

    def on(self, method, path, status=200, json=None, content=None, headers=None):
        """Register a canned answer; ``json`` may be a callable taking the request."""
        self.routes[(method.upper(), path)] = (status, json, content, headers)

    def fail(self, method, path, exc):
        """Make ``path`` raise a transport exception (e.g. httpx.ConnectError)."""
        self.routes[(method.upper(), path)] = exc

    def answer_everything(self, status=200, json=None):
        """Answer every unregistered route with the same canned response."""
        self.fallback = (status, json, None, None)

    def fail_everything(self, exc):
        """Make every unregistered route raise ``exc``."""
        self.fallback = exc

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        entry = self.routes.get((request.method, request.url.path), self.fallback)
        if entry is None:
            return httpx.Response(404, json={"error": "not found"})
        if isinstance(entry, Exception):
            raise entry
        status, body, content, headers = entry
        if callable(body):
            body = body(request)
        if content is not None:
            return httpx.Response(status, content=content, headers=headers)
        if body is None:
            return httpx.Response(status, headers=headers)
        return httpx.Response(status, json=body, headers=headers)

    def requests_to(self, method, path) -> list[httpx.Request]:
        return [
            r for r in self.calls
            if r.method == method.upper() and r.url.path == path
        ]

    def last(self, method, path) -> httpx.Request:
        matches = self.requests_to(method, path)
        assert matches, f"backend never received {method} {path}"
        return matches[-1]

    @staticmethod
    def body(request: httpx.Request):
        return json.loads(request.content) if request.content else None


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
async def backend_client(backend):
    c = ResilientBackendClient(
        BACKEND_URL,
        max_retries=2,
        base_delay_ms=0,
        max_delay_ms=0,
        transport=httpx.MockTransport(backend.handle),
    )
    yield c
    await c.aclose()


@pytest.fixture
async def client(backend_client):
    """App test client with the backend dependency overridden."""
    app.dependency_overrides[get_backend_client] = lambda: backend_client
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def login(client, backend):
    """Log the test client in through /login; returns the backend user."""

    async def _login(role="admin", name="Ayesha", email="ayesha@zargon.test"):
        user = {"_id": "u1", "name": name, "email": email, "role": role}
        backend.on("POST", "/api/auth/login", json={"token": TOKEN, "user": user})
        res = await client.post(
            "/login", data={"email": email, "password": "secret1"},
        )
        assert res.status_code == 303
        return user

    return _login


@pytest.fixture
def session(client):
    """Decode the signed session cookie the way SessionMiddleware wrote it."""
    settings = get_settings()

    def _session() -> dict:
        cookie = client.cookies.get(settings.session_cookie)
        if not cookie:
            return {}
        signer = TimestampSigner(settings.session_secret)
        raw = signer.unsign(cookie.encode(), max_age=settings.session_max_age_seconds)
        return json.loads(b64decode(raw))

    return _session


@pytest.fixture
def flashes(session):
    """Messages waiting in the session (not consumed by reading them here)."""

    def _flashes() -> list[str]:
        return [f["message"] for f in session().get("_flashes", [])]

    return _flashes


@pytest.fixture
async def admin(login):
    return await login(role="admin")


@pytest.fixture
async def staff(login):
    return await login(role="staff", name="Rafi", email="rafi@zargon.test")
