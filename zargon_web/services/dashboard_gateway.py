"""Dashboard Gateway — backend facade used by server-rendered pages.

Invariants:
    - Every call sends ``Authorization: Bearer <token>`` when the page has a token
    - Non-2xx answers raise BackendResponseError; 401 on an authenticated call
      raises SessionExpiredError instead
    - 2xx with a non-JSON body raises InvalidBackendPayloadError
    - Binary downloads go through services/proxy.forward, not through here

Design Decisions:
    - Raise instead of relay: pages turn failures into flash messages, so a
      single exception path is simpler than inspecting status codes per call
    - Thin methods named after what the page does, one backend call each
"""

import logging
from typing import Any
from urllib.parse import quote

from zargon_web.core.domain_types import BackupType, DatabaseTarget
from zargon_web.core.errors import (
    BackendResponseError,
    ErrorContext,
    InvalidBackendPayloadError,
    SessionExpiredError,
)
from zargon_web.core.proxy_policy import parse_json_text
from zargon_web.infrastructure.backend_client import ResilientBackendClient

logger = logging.getLogger(__name__)

CATALOG_PAGE_SIZE = 1000


def bearer(token: str | None) -> str | None:
    return f"Bearer {token}" if token else None


def _quote_segment(value: str) -> str:
    return quote(str(value), safe="")


class DashboardGateway:
    """Backend calls for the dashboard, authenticated with the session token."""

    def __init__(self, client: ResilientBackendClient, token: str | None = None):
        self.client = client
        self.token = token

    async def call(
        self,
        method: str,
        path: str,
        *,
        params: Any = None,
        json: Any = None,
        files: Any = None,
        authenticated: bool = True,
    ) -> Any:
        """One backend call; returns parsed JSON or raises."""
        ctx = ErrorContext(backend_path=path, method=method)
        response = await self.client.request(
            method, path,
            authorization=bearer(self.token) if authenticated else None,
            params=params,
            json=json,
            files=files,
            context=ctx,
        )
        if response.status_code == 204:
            return None

        body = parse_json_text(response.text)
        if not response.is_success:
            if response.status_code == 401 and authenticated:
                logger.info(
                    "Backend rejected session token",
                    extra={"backend_path": path, "status_code": 401},
                )
                raise SessionExpiredError(context=ctx)
            raise BackendResponseError(
                response.status_code,
                body if body is not None else response.text,
                context=ctx,
            )
        if body is None and response.text.strip():
            raise InvalidBackendPayloadError(response.text[:200], context=ctx)
        return body

    # ─── Auth ───────────────────────────────────────────────────

    async def login(self, email: str, password: str) -> dict:
        return await self.call(
            "POST", "/api/auth/login",
            json={"email": email, "password": password},
            authenticated=False,
        )

    async def set_staff_password(self, email: str, new_password: str) -> dict:
        return await self.call(
            "POST", "/api/auth/set-staff-password",
            json={"email": email, "newPassword": new_password},
            authenticated=False,
        )

    # ─── Inventory ──────────────────────────────────────────────

    async def list_inventory(self, params: dict | None = None) -> dict:
        return await self.call("GET", "/api/inventory", params=params) or {}

    async def inventory_catalog(self) -> list[dict]:
        """All active items, for product pickers and price lookups."""
        page = await self.list_inventory({"pageSize": str(CATALOG_PAGE_SIZE)})
        return page.get("data") or []

    async def create_inventory(self, payload: dict) -> dict:
        return await self.call("POST", "/api/inventory", json=payload)

    async def update_inventory(self, item_id: str, payload: dict) -> dict:
        return await self.call(
            "PATCH", f"/api/inventory/{_quote_segment(item_id)}", json=payload,
        )

    async def delete_inventory(self, item_id: str) -> Any:
        return await self.call("DELETE", f"/api/inventory/{_quote_segment(item_id)}")

    async def upload_images(self, item_id: str, files: list) -> dict:
        return await self.call(
            "POST", f"/api/inventory/{_quote_segment(item_id)}/images", files=files,
        )

    async def remove_image(self, item_id: str, image_url: str) -> dict:
        return await self.call(
            "DELETE", f"/api/inventory/{_quote_segment(item_id)}/images",
            json={"imageUrl": image_url},
        )

    # ─── Orders ─────────────────────────────────────────────────

    async def list_orders(self, params: dict | None = None) -> dict:
        return await self.call("GET", "/api/orders", params=params) or {}

    async def create_order(self, payload: dict) -> dict:
        return await self.call("POST", "/api/orders", json=payload)

    async def update_order(self, order_id: str, payload: dict) -> dict:
        return await self.call(
            "PATCH", f"/api/orders/{_quote_segment(order_id)}", json=payload,
        )

    async def delete_order(self, order_id: str) -> Any:
        return await self.call("DELETE", f"/api/orders/{_quote_segment(order_id)}")

    async def update_order_status(
        self, order_id: str, status: str,
        reason_note: str | None = None, is_auto_sync: bool = False,
    ) -> dict:
        """``is_auto_sync`` marks a courier-driven change so no manual override is recorded."""
        body: dict[str, Any] = {"status": status}
        if reason_note is not None:
            body["reasonNote"] = reason_note
        if is_auto_sync:
            body["isAutoSync"] = True
        return await self.call(
            "PATCH", f"/api/orders/{_quote_segment(order_id)}/status", json=body,
        )

    async def manual_overrides(self) -> dict:
        return await self.call("GET", "/api/orders/manual-overrides") or {}

    async def clear_manual_override(self, order_id: str) -> dict:
        return await self.call(
            "DELETE", f"/api/orders/{_quote_segment(order_id)}/manual-override",
        )

    async def clear_all_manual_overrides(self) -> dict:
        return await self.call("DELETE", "/api/orders/manual-overrides/clear-all")

    # ─── Delivery & courier ─────────────────────────────────────

    async def toggle_delivery(self, order_id: str, selected: bool) -> dict:
        return await self.call(
            "PATCH", f"/api/delivery/{_quote_segment(order_id)}/toggle",
            json={"selected": selected},
        )

    async def clear_delivery(self) -> dict:
        return await self.call("POST", "/api/delivery/clear")

    async def delivery_voucher(self) -> dict:
        return await self.call(
            "GET", "/api/delivery/export", params={"format": "json"},
        ) or {}

    async def send_to_courier(self, order_id: str) -> dict:
        return await self.call(
            "POST", "/api/courier/create-order", json={"orderId": order_id},
        )

    async def send_bulk_to_courier(self, order_ids: list[str]) -> dict:
        return await self.call(
            "POST", "/api/courier/bulk-order", json={"orderIds": order_ids},
        )

    async def courier_status(self, kind: str, value: str) -> dict:
        """``kind`` is one of consignment, invoice, tracking."""
        return await self.call(
            "GET", f"/api/courier/status/{kind}/{_quote_segment(value)}",
        )

    # ─── Reports & notices ──────────────────────────────────────

    async def reports(self) -> dict:
        return await self.call("GET", "/api/reports") or {}

    async def alerts(self) -> dict:
        return await self.call("GET", "/api/reports/alerts") or {}

    async def list_notices(self) -> list[dict]:
        result = await self.call("GET", "/api/notices")
        data = result.get("data", result) if isinstance(result, dict) else result
        return data if isinstance(data, list) else []

    async def create_notice(self, payload: dict) -> dict:
        return await self.call("POST", "/api/notices", json=payload)

    async def update_notice(self, notice_id: str, payload: dict) -> dict:
        return await self.call(
            "PUT", f"/api/notices/{_quote_segment(notice_id)}", json=payload,
        )

    async def delete_notice(self, notice_id: str) -> Any:
        return await self.call("DELETE", f"/api/notices/{_quote_segment(notice_id)}")

    # ─── Backup & database ──────────────────────────────────────

    async def backup_status(self) -> dict:
        return await self.call("GET", "/api/backup/status") or {}

    async def backup_health(self) -> dict:
        return await self.call("GET", "/api/backup/health") or {}

    async def create_backup(self, backup_type: BackupType) -> dict:
        return await self.call(
            "POST", "/api/backup/create", json={"type": backup_type.value},
        )

    async def restore_backup(self, file_name: str) -> dict:
        return await self.call(
            "POST", "/api/backup/restore", json={"fileName": file_name},
        )

    async def database_status(self) -> dict:
        return await self.call("GET", "/api/database/status") or {}

    async def database_health(self) -> dict:
        return await self.call("GET", "/api/database/health") or {}

    async def switch_database(self, target: DatabaseTarget) -> dict:
        return await self.call(
            "POST", "/api/database/switch", json={"target": target.value},
        )

    async def enable_auto_failover(self) -> dict:
        return await self.call("POST", "/api/database/auto-failover")

    # ─── Users & staff ──────────────────────────────────────────

    async def profile(self) -> dict:
        return await self.call("GET", "/api/users/profile") or {}

    async def update_profile(self, payload: dict) -> dict:
        return await self.call("PUT", "/api/users/profile", json=payload)

    async def staff(self) -> list[dict]:
        result = await self.call("GET", "/api/users/staff") or {}
        return result.get("staff") or []

    async def all_users(self) -> list[dict]:
        result = await self.call("GET", "/api/users/all") or {}
        return result.get("users") or []

    async def create_staff(self, payload: dict) -> dict:
        return await self.call("POST", "/api/users/staff", json=payload)

    async def toggle_staff_status(self, staff_id: str) -> dict:
        return await self.call(
            "PUT", f"/api/users/staff/{_quote_segment(staff_id)}/toggle-status",
        )

    async def delete_staff(self, staff_id: str) -> Any:
        return await self.call("DELETE", f"/api/users/staff/{_quote_segment(staff_id)}")

    async def set_staff_password_by_admin(self, staff_id: str, new_password: str) -> dict:
        return await self.call(
            "PUT", f"/api/users/staff/{_quote_segment(staff_id)}/password",
            json={"newPassword": new_password},
        )

    async def activity(
        self, staff_id: str | None = None, params: dict | None = None,
    ) -> list[dict]:
        path = (
            f"/api/users/staff/{_quote_segment(staff_id)}/activity"
            if staff_id else "/api/users/activity"
        )
        result = await self.call("GET", path, params=params) or {}
        return result.get("activities") or []

    # ─── Analytics ──────────────────────────────────────────────

    async def analytics(self, report: str, params: dict | None = None) -> dict:
        return await self.call(
            "GET", f"/api/analytics/{_quote_segment(report)}", params=params,
        ) or {}

    async def customer_rankings(self, timespan: str) -> dict:
        return await self.call(
            "GET", "/api/customer-rankings", params={"timespan": timespan},
        ) or {}

    async def customer_trends(self, phone: str) -> dict:
        return await self.call(
            "GET", f"/api/customer-rankings/{_quote_segment(phone)}/trends",
        ) or {}
