"""Catch-all error handler tests — unexpected exceptions on pages and API routes.

Invariants:
    - A page request gets the HTML error page, an /api request gets JSON
    - Neither response carries the exception text

Tests cover:
    - Dashboard page whose dependency raises RuntimeError
    - Proxy route whose backend client dependency raises RuntimeError
"""

import pytest
from httpx import ASGITransport, AsyncClient

from zargon_web.api.dependencies import get_backend_client
from zargon_web.main import app
from zargon_web.services.session_auth import require_user


def _explode():
    raise RuntimeError("secret stack detail")


@pytest.fixture
async def lenient_client():
    """Client that receives the 500 response instead of the re-raised exception."""
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as c:
        yield c
    app.dependency_overrides.clear()


async def test_page_error_renders_html(lenient_client):
    app.dependency_overrides[require_user] = _explode
    res = await lenient_client.get("/dashboard/orders")
    assert res.status_code == 500
    assert res.headers["content-type"].startswith("text/html")
    assert "Something went wrong" in res.text
    assert "An unexpected error occurred" in res.text
    assert "secret stack detail" not in res.text


async def test_api_error_stays_json(lenient_client):
    app.dependency_overrides[get_backend_client] = _explode
    res = await lenient_client.get("/api/orders")
    assert res.status_code == 500
    assert res.json()["error"]["code"] == "INTERNAL_ERROR"
    assert "secret stack detail" not in res.text
