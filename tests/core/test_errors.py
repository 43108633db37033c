"""Error hierarchy tests — codes, REST envelope, flash text and backend messages.

Tests cover:
    - to_response() envelope shape
    - BackendResponseError message extraction and backend_code
    - User-facing flash text never exposes internals
    - extract_backend_message across backend error shapes
"""

import pytest

from zargon_web.core.errors import (
    BackendResponseError,
    BackendTimeoutError,
    BackendUnavailableError,
    ErrorContext,
    FormValidationError,
    LoginRequiredError,
    SessionExpiredError,
    extract_backend_message,
)


def test_to_response_envelope():
    err = BackendUnavailableError(
        "connection refused",
        context=ErrorContext(backend_path="/api/orders", method="GET"),
    )
    body = err.to_response()["error"]
    assert body["code"] == "BACKEND_UNAVAILABLE"
    assert body["category"] == "external_api"
    assert body["severity"] == "critical"
    assert body["context"]["backend_path"] == "/api/orders"
    assert err.http_status == 502


def test_backend_response_error_uses_backend_message():
    err = BackendResponseError(400, {"error": {"code": "DUP", "message": "Code exists"}})
    assert err.message == "Code exists"
    assert err.backend_code == "DUP"
    assert err.context.status_code == 400
    assert err.http_status == 400


def test_backend_response_error_without_message():
    err = BackendResponseError(500, None)
    assert err.message == "Backend responded with status 500"
    assert err.backend_code is None


def test_backend_code_from_flat_body():
    assert BackendResponseError(401, {"code": "ACCOUNT_INACTIVE"}).backend_code == (
        "ACCOUNT_INACTIVE"
    )


def test_transport_errors_flash_generic_text():
    assert "connect" in BackendUnavailableError("ECONNREFUSED 10.0.0.1").flash_message()
    assert "ECONNREFUSED" not in BackendUnavailableError("ECONNREFUSED").flash_message()
    assert BackendTimeoutError().flash_message() == (
        "Server error. Please try again in a moment."
    )


def test_dashboard_errors():
    assert FormValidationError("Bad", "phone").field == "phone"
    assert LoginRequiredError("/dashboard/orders").next_path == "/dashboard/orders"
    assert SessionExpiredError().http_status == 401


@pytest.mark.parametrize("body,expected", [
    ({"error": {"message": "nested"}}, "nested"),
    ({"error": "flat", "message": "preferred"}, "preferred"),
    ({"error": "flat"}, "flat"),
    ("  plain text  ", "plain text"),
    ("", None),
    ([1, 2], None),
    ({}, None),
])
def test_extract_backend_message(body, expected):
    assert extract_backend_message(body) == expected
