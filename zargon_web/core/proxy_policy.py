"""Proxy Policies — pure rules mapping backend outcomes to client responses.

Invariants:
    - No IO: every function takes plain values and returns (status, body)
    - A policy decides both the non-2xx mapping and the transport-failure mapping
    - SOFT never surfaces a backend failure as an HTTP error (status 200)
    - STRICT always answers 500 on any failure, hiding the backend status

Design Decisions:
    - Policy per route rather than per resource: the backend's own endpoints
      disagree on error shapes and the dashboard depends on each shape
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any
from urllib.parse import quote

DEFAULT_TRANSPORT_MESSAGE = "Internal server error"
PROXY_ERROR_CODE = "PROXY_ERROR"
BACKEND_ERROR_CODE = "BACKEND_ERROR"

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PDF_MEDIA_TYPE = "application/pdf"
CSV_MEDIA_TYPE = "text/csv"


class FailurePolicy(str, Enum):
    """How a failed backend call is reported to the caller."""
    WRAPPED = "wrapped"          # {"error": {"message": M}}, backend status
    FLAT = "flat"                # {"error": M}, backend status
    DETAILED = "detailed"        # {"error": M, "details": text}, backend status
    PASSTHROUGH = "passthrough"  # backend body verbatim, backend status
    CODED = "coded"              # {"error": {"code": BACKEND_ERROR, "message": text}}
    SOFT = "soft"                # 200 {"error": ..., "disabled": true}
    STRICT = "strict"            # 500 {"error": M}


class BodyKind(str, Enum):
    NONE = "none"
    JSON = "json"
    MULTIPART = "multipart"


@dataclass(frozen=True)
class BinaryRelay:
    """Successful answers are relayed as raw bytes with these headers."""
    media_type: str
    default_filename: str

    def content_disposition(self, backend_value: str | None) -> str:
        return backend_value or f"attachment; filename={self.default_filename}"


@dataclass(frozen=True)
class ProxyRoute:
    """One forwarded endpoint: where it goes and how its failures look."""
    name: str
    method: str
    backend_path: str
    policy: FailurePolicy
    failure_message: str = "Request failed"
    transport_message: str = DEFAULT_TRANSPORT_MESSAGE
    body: BodyKind = BodyKind.NONE
    forward_query: bool = False
    forward_auth: bool = True
    binary: BinaryRelay | None = None
    # Overrides policy for unreachable-backend answers only.
    transport_policy: FailurePolicy | None = None

    def backend_url_path(self, **path_params: str) -> str:
        """Backend path with each parameter URL-quoted into place."""
        quoted = {k: quote(str(v), safe="") for k, v in path_params.items()}
        return self.backend_path.format(**quoted)

    def failure_text(self, status_code: int) -> str:
        return self.failure_message.format(status=status_code)


def parse_json_text(text: str) -> Any:
    """Parse backend text as JSON, returning None when it is not JSON."""
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


def map_backend_failure(
    route: ProxyRoute, status_code: int, text: str,
) -> tuple[int, Any]:
    """Map a non-2xx backend answer to the (status, body) returned to the client."""
    policy = route.policy
    message = route.failure_text(status_code)

    if policy is FailurePolicy.WRAPPED:
        return status_code, {"error": {"message": message}}
    if policy is FailurePolicy.FLAT:
        return status_code, {"error": message}
    if policy is FailurePolicy.DETAILED:
        return status_code, {"error": message, "details": text}
    if policy is FailurePolicy.PASSTHROUGH:
        parsed = parse_json_text(text)
        if parsed is None:
            return status_code, {"error": text}
        return status_code, parsed
    if policy is FailurePolicy.CODED:
        return status_code, {
            "error": {"code": BACKEND_ERROR_CODE, "message": text},
        }
    if policy is FailurePolicy.SOFT:
        parsed = parse_json_text(text)
        backend_error = parsed.get("error") if isinstance(parsed, dict) else None
        return 200, {"error": backend_error or message, "disabled": True}
    if policy is FailurePolicy.STRICT:
        return 500, {"error": message}
    raise ValueError(f"Unknown failure policy: {policy}")


def map_transport_failure(route: ProxyRoute, detail: str) -> tuple[int, Any]:
    """Map an unreachable/unreadable backend to the (status, body) for the client.

    ``detail`` is the exception text; only DETAILED and CODED expose it.
    """
    policy = route.transport_policy or route.policy
    transport = route.transport_message

    if policy in (FailurePolicy.WRAPPED, FailurePolicy.SOFT):
        return 500, {"error": {"message": transport}}
    if policy is FailurePolicy.FLAT:
        return 500, {"error": transport}
    if policy is FailurePolicy.DETAILED:
        return 500, {"error": transport, "details": detail or "Unknown error"}
    if policy is FailurePolicy.PASSTHROUGH:
        return 500, {"error": {"code": PROXY_ERROR_CODE, "message": transport}}
    if policy is FailurePolicy.CODED:
        return 500, {
            "error": {"code": PROXY_ERROR_CODE, "message": detail or "Unknown error"},
        }
    if policy is FailurePolicy.STRICT:
        return 500, {"error": route.failure_text(500)}
    raise ValueError(f"Unknown failure policy: {policy}")
