"""Auth page tests — login, logout, first-login password and page guards.

Invariants:
    - Anonymous dashboard requests redirect to /login?next=<path>
    - Backend 401 on a page call ends the session and redirects to /login
    - Staff hitting admin pages are sent back to /dashboard
    - PASSWORD_SET_REQUIRED hands off to /set-password

Tests cover:
    - Login success/failure/inactive/unreachable
    - Logout clears the session
    - /set-password flows with and without a returned token
    - Role guards and session expiry
"""

from urllib.parse import parse_qs, urlsplit

import httpx

TOKEN = "tok-123"


# --- Login ---

async def test_login_page_renders(client):
    res = await client.get("/login")
    assert res.status_code == 200
    assert 'action="/login"' in res.text


async def test_login_success_stores_session_and_redirects(client, backend, session, flashes):
    backend.on("POST", "/api/auth/login", json={
        "token": TOKEN,
        "user": {"_id": "u1", "name": "Ayesha", "email": "a@z.test", "role": "admin"},
    })
    res = await client.post("/login", data={
        "email": " A@Z.test ", "password": "secret1", "next": "/dashboard/orders",
    })
    assert res.status_code == 303
    assert res.headers["location"] == "/dashboard/orders"
    assert session()["token"] == TOKEN
    assert session()["user"]["role"] == "admin"
    assert flashes() == ["Welcome back, Ayesha!"]
    assert backend.body(backend.last("POST", "/api/auth/login")) == {
        "email": "a@z.test", "password": "secret1",
    }


async def test_login_rejects_offsite_next(client, backend):
    backend.on("POST", "/api/auth/login", json={"token": TOKEN, "user": {"name": "A"}})
    res = await client.post("/login", data={
        "email": "a@z.test", "password": "x", "next": "//evil.example/",
    })
    assert res.headers["location"] == "/"


async def test_login_invalid_credentials(client, backend, session):
    backend.on("POST", "/api/auth/login", status=401, json={"error": "Invalid"})
    res = await client.post("/login", data={"email": "a@z.test", "password": "bad"})
    assert res.status_code == 200
    assert "Invalid email or password" in res.text
    assert "token" not in session()


async def test_login_inactive_account(client, backend):
    backend.on(
        "POST", "/api/auth/login", status=401,
        json={"error": {"code": "ACCOUNT_INACTIVE", "message": "inactive"}},
    )
    res = await client.post("/login", data={"email": "a@z.test", "password": "x"})
    assert "Your account has been deactivated. Please contact admin." in res.text


async def test_login_backend_unreachable(client, backend):
    backend.fail("POST", "/api/auth/login", httpx.ConnectError("refused"))
    res = await client.post("/login", data={"email": "a@z.test", "password": "x"})
    assert res.status_code == 200
    assert "Cannot connect to server." in res.text


async def test_login_missing_fields_is_400(client, backend):
    res = await client.post("/login", data={"email": "", "password": ""})
    assert res.status_code == 400
    assert "Please enter your email and password" in res.text
    assert backend.calls == []


async def test_login_password_set_required_redirects(client, backend):
    backend.on("POST", "/api/auth/login", status=202, json={
        "error": {"code": "PASSWORD_SET_REQUIRED"},
        "user": {"email": "rafi@z.test", "name": "Rafi"},
    })
    res = await client.post("/login", data={"email": "rafi@z.test", "password": "x"})
    assert res.status_code == 303
    location = urlsplit(res.headers["location"])
    assert location.path == "/set-password"
    assert parse_qs(location.query) == {"email": ["rafi@z.test"], "name": ["Rafi"]}


async def test_logged_in_user_visiting_login_goes_home(client, admin):
    res = await client.get("/login")
    assert res.status_code == 303
    assert res.headers["location"] == "/"


async def test_logout_clears_session(client, admin, session, flashes):
    res = await client.post("/logout")
    assert res.status_code == 303
    assert res.headers["location"] == "/login"
    assert "token" not in session()
    assert flashes() == ["You have been logged out."]


# --- Set password ---

async def test_set_password_page_requires_email(client):
    res = await client.get("/set-password")
    assert res.status_code == 303
    assert res.headers["location"] == "/login"


async def test_set_password_page_renders(client):
    res = await client.get("/set-password?email=rafi@z.test&name=Rafi")
    assert res.status_code == 200
    assert "Welcome, Rafi!" in res.text


async def test_set_password_mismatch(client, backend):
    res = await client.post("/set-password", data={
        "email": "rafi@z.test", "new_password": "secret1", "confirm_password": "secret2",
    })
    assert res.status_code == 400
    assert "Passwords do not match" in res.text
    assert backend.calls == []


async def test_set_password_with_token_logs_in(client, backend, session):
    backend.on("POST", "/api/auth/set-staff-password", json={
        "token": "fresh", "user": {"_id": "s1", "name": "Rafi", "role": "staff"},
    })
    res = await client.post("/set-password", data={
        "email": "rafi@z.test", "new_password": "secret1", "confirm_password": "secret1",
    })
    assert res.status_code == 303
    assert res.headers["location"] == "/dashboard"
    assert session()["token"] == "fresh"
    assert backend.body(backend.last("POST", "/api/auth/set-staff-password")) == {
        "email": "rafi@z.test", "newPassword": "secret1",
    }


async def test_set_password_without_token_sends_to_login(client, backend, flashes):
    backend.on("POST", "/api/auth/set-staff-password", json={"success": True})
    res = await client.post("/set-password", data={
        "email": "rafi@z.test", "new_password": "secret1", "confirm_password": "secret1",
    })
    assert res.headers["location"] == "/login"
    assert flashes() == ["Password set. Please log in."]


async def test_set_password_backend_error_rerenders(client, backend):
    backend.on(
        "POST", "/api/auth/set-staff-password", status=400,
        json={"error": {"message": "Password already set"}},
    )
    res = await client.post("/set-password", data={
        "email": "rafi@z.test", "new_password": "secret1", "confirm_password": "secret1",
    })
    assert res.status_code == 200
    assert "Password already set" in res.text


# --- Guards ---

async def test_anonymous_dashboard_redirects_to_login(client):
    res = await client.get("/dashboard/orders")
    assert res.status_code == 303
    assert res.headers["location"] == "/login?next=%2Fdashboard%2Forders"


async def test_anonymous_home_redirects_to_plain_login(client):
    res = await client.get("/")
    assert res.status_code == 303
    assert res.headers["location"] == "/login"


async def test_staff_cannot_open_admin_pages(client, staff, flashes):
    res = await client.get("/dashboard/admin")
    assert res.status_code == 303
    assert res.headers["location"] == "/dashboard"
    assert "Admin access required." in flashes()


async def test_expired_token_ends_session(client, backend, admin, session, flashes):
    backend.on("GET", "/api/reports", status=401, json={"error": "jwt expired"})
    res = await client.get("/")
    assert res.status_code == 303
    assert res.headers["location"] == "/login"
    assert "token" not in session()
    assert flashes() == ["Your session has expired. Please log in again."]


async def test_home_renders_with_backend_bearer(client, backend, admin):
    backend.on("GET", "/api/reports", json={
        "overview": {"lowStockItems": 7, "outOfStockItems": 2},
        "lowStockItems": [
            {"finalCode": f"C{i}", "color": "Red", "totalQty": 1} for i in range(7)
        ],
    })
    res = await client.get("/")
    assert res.status_code == 200
    assert "Hello, Ayesha" in res.text
    assert "and 2 more" in res.text
    assert backend.last("GET", "/api/reports").headers["authorization"] == f"Bearer {TOKEN}"


async def test_home_shows_inline_error_when_backend_down(client, backend, admin):
    backend.fail("GET", "/api/reports", httpx.ConnectError("refused"))
    res = await client.get("/")
    assert res.status_code == 200
    assert "Cannot connect to server. Please try again in a moment." in res.text
