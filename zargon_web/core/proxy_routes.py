"""Proxy Route Table — every forwarded backend endpoint in one place.

Invariants:
    - One ProxyRoute per (method, path) exposed under /api
    - Backend paths mirror the proxy paths except customer rankings,
      which the backend serves at /api/customer-rankings
    - Messages are the strings the dashboard and older clients match on
"""

from zargon_web.core.proxy_policy import (
    BinaryRelay,
    BodyKind,
    FailurePolicy,
    ProxyRoute,
    CSV_MEDIA_TYPE,
    PDF_MEDIA_TYPE,
    XLSX_MEDIA_TYPE,
)

W = FailurePolicy.WRAPPED
F = FailurePolicy.FLAT
D = FailurePolicy.DETAILED
P = FailurePolicy.PASSTHROUGH
C = FailurePolicy.CODED
S = FailurePolicy.SOFT
X = FailurePolicy.STRICT

STAFF_PROXY_MESSAGE = "Failed to connect to backend"


# ─── Auth ────────────────────────────────────────────────────────

AUTH_LOGIN = ProxyRoute(
    "auth.login", "POST", "/api/auth/login", W, "Login failed",
    body=BodyKind.JSON, forward_auth=False,
)
AUTH_REGISTER = ProxyRoute(
    "auth.register", "POST", "/api/auth/register", P,
    transport_message="Registration failed",
    body=BodyKind.JSON, forward_auth=False,
)
AUTH_SET_STAFF_PASSWORD = ProxyRoute(
    "auth.set_staff_password", "POST", "/api/auth/set-staff-password", P,
    transport_message=STAFF_PROXY_MESSAGE,
    body=BodyKind.JSON, forward_auth=False,
)
AUTH_TEST_PATH = "/api/auth/test"


# ─── Inventory ───────────────────────────────────────────────────

INVENTORY_LIST = ProxyRoute(
    "inventory.list", "GET", "/api/inventory", W,
    "Failed to fetch inventory", forward_query=True,
)
INVENTORY_CREATE = ProxyRoute(
    "inventory.create", "POST", "/api/inventory", W,
    "Failed to create inventory item", body=BodyKind.JSON,
)
INVENTORY_UPDATE = ProxyRoute(
    "inventory.update", "PATCH", "/api/inventory/{id}", W,
    "Failed to update inventory item", body=BodyKind.JSON,
)
INVENTORY_DELETE = ProxyRoute(
    "inventory.delete", "DELETE", "/api/inventory/{id}", W,
    "Failed to delete inventory item",
)
INVENTORY_IMAGES_UPLOAD = ProxyRoute(
    "inventory.images.upload", "POST", "/api/inventory/{id}/images", D,
    "Image upload failed", transport_message="Proxy error",
    body=BodyKind.MULTIPART,
)
INVENTORY_IMAGES_DELETE = ProxyRoute(
    "inventory.images.delete", "DELETE", "/api/inventory/{id}/images", D,
    "Image delete failed", transport_message="Proxy error",
    body=BodyKind.JSON,
)


# ─── Orders ──────────────────────────────────────────────────────

ORDERS_LIST = ProxyRoute(
    "orders.list", "GET", "/api/orders", W,
    "Failed to fetch orders", forward_query=True,
)
ORDERS_CREATE = ProxyRoute(
    "orders.create", "POST", "/api/orders", P,
    transport_message="Internal server error", body=BodyKind.JSON,
    transport_policy=W,
)
ORDERS_UPDATE = ProxyRoute(
    "orders.update", "PATCH", "/api/orders/{id}", W,
    "Failed to update order", body=BodyKind.JSON,
)
ORDERS_DELETE = ProxyRoute(
    "orders.delete", "DELETE", "/api/orders/{id}", W, "Failed to delete order",
)
ORDERS_STATUS = ProxyRoute(
    "orders.status", "PATCH", "/api/orders/{id}/status", W,
    "Failed to update order status", body=BodyKind.JSON,
)
ORDERS_MANUAL_OVERRIDES = ProxyRoute(
    "orders.manual_overrides", "GET", "/api/orders/manual-overrides", W,
    "Failed to fetch manual overrides",
    transport_message="Failed to fetch manual overrides",
)
ORDERS_MANUAL_OVERRIDES_CLEAR_ALL = ProxyRoute(
    "orders.manual_overrides.clear_all", "DELETE",
    "/api/orders/manual-overrides/clear-all", W,
    "Failed to clear manual overrides",
    transport_message="Failed to clear manual overrides",
)
ORDERS_MANUAL_OVERRIDE_CLEAR = ProxyRoute(
    "orders.manual_override.clear", "DELETE",
    "/api/orders/{id}/manual-override", W,
    "Failed to clear manual override",
    transport_message="Failed to clear manual override",
)


# ─── Reports ─────────────────────────────────────────────────────

REPORTS = ProxyRoute("reports.get", "GET", "/api/reports", W, "Failed to fetch reports")
REPORTS_ALERTS = ProxyRoute(
    "reports.alerts", "GET", "/api/reports/alerts", W, "Failed to fetch alerts",
)


# ─── Notices ─────────────────────────────────────────────────────

NOTICES_LIST = ProxyRoute("notices.list", "GET", "/api/notices", X, "Failed to fetch notices")
NOTICES_CREATE = ProxyRoute(
    "notices.create", "POST", "/api/notices", X,
    "Failed to create notice", body=BodyKind.JSON,
)
NOTICES_UPDATE = ProxyRoute(
    "notices.update", "PUT", "/api/notices/{id}", X,
    "Failed to update notice", body=BodyKind.JSON,
)
NOTICES_DELETE = ProxyRoute(
    "notices.delete", "DELETE", "/api/notices/{id}", X, "Failed to delete notice",
)


# ─── Backup ──────────────────────────────────────────────────────

BACKUP_STATUS = ProxyRoute(
    "backup.status", "GET", "/api/backup/status", S, "Failed to get backup status",
)
BACKUP_HEALTH = ProxyRoute(
    "backup.health", "GET", "/api/backup/health", S, "Failed to get backup health",
)
BACKUP_CREATE = ProxyRoute(
    "backup.create", "POST", "/api/backup/create", S,
    "Failed to create backup", body=BodyKind.JSON,
)
BACKUP_RESTORE = ProxyRoute(
    "backup.restore", "POST", "/api/backup/restore", S,
    "Failed to restore backup", body=BodyKind.JSON,
)


# ─── Database failover ──────────────────────────────────────────

DATABASE_STATUS = ProxyRoute(
    "database.status", "GET", "/api/database/status", X,
    "Failed to get database status",
)
DATABASE_HEALTH = ProxyRoute(
    "database.health", "GET", "/api/database/health", X,
    "Failed to check database health",
)
DATABASE_SWITCH = ProxyRoute(
    "database.switch", "POST", "/api/database/switch", X,
    "Failed to switch database", body=BodyKind.JSON,
)
DATABASE_AUTO_FAILOVER = ProxyRoute(
    "database.auto_failover", "POST", "/api/database/auto-failover", X,
    "Failed to enable auto-failover",
)


# ─── Users & staff ──────────────────────────────────────────────

USERS_LIST = ProxyRoute(
    "users.list", "GET", "/api/users", P, transport_message=STAFF_PROXY_MESSAGE,
)
USERS_CREATE = ProxyRoute(
    "users.create", "POST", "/api/users", P,
    transport_message=STAFF_PROXY_MESSAGE, body=BodyKind.JSON,
)
USERS_ALL = ProxyRoute("users.all", "GET", "/api/users/all", C)
USERS_PROFILE = ProxyRoute("users.profile", "GET", "/api/users/profile", C)
USERS_PROFILE_UPDATE = ProxyRoute(
    "users.profile.update", "PUT", "/api/users/profile", C, body=BodyKind.JSON,
)
USERS_ACTIVITY = ProxyRoute(
    "users.activity", "GET", "/api/users/activity", P,
    transport_message=STAFF_PROXY_MESSAGE, forward_query=True,
)
STAFF_LIST = ProxyRoute(
    "staff.list", "GET", "/api/users/staff", P,
    transport_message=STAFF_PROXY_MESSAGE,
)
STAFF_CREATE = ProxyRoute(
    "staff.create", "POST", "/api/users/staff", P,
    transport_message=STAFF_PROXY_MESSAGE, body=BodyKind.JSON,
)
STAFF_ACTIVITY = ProxyRoute(
    "staff.activity", "GET", "/api/users/staff/{id}/activity", P,
    transport_message=STAFF_PROXY_MESSAGE, forward_query=True,
)
STAFF_PASSWORD = ProxyRoute(
    "staff.password", "PUT", "/api/users/staff/{id}/password", P,
    transport_message=STAFF_PROXY_MESSAGE, body=BodyKind.JSON,
)
STAFF_DELETE = ProxyRoute(
    "staff.delete", "DELETE", "/api/users/staff/{id}", P,
    transport_message=STAFF_PROXY_MESSAGE,
)
STAFF_TOGGLE_STATUS = ProxyRoute(
    "staff.toggle_status", "PUT", "/api/users/staff/{id}/toggle-status", P,
    transport_message=STAFF_PROXY_MESSAGE,
)


# ─── Analytics ───────────────────────────────────────────────────

CUSTOMER_RANKINGS = ProxyRoute(
    "analytics.customer_rankings", "GET", "/api/customer-rankings", F,
    "Failed to fetch customer rankings",
    transport_message="Failed to fetch customer rankings", forward_query=True,
)
CUSTOMER_RANKING_TRENDS = ProxyRoute(
    "analytics.customer_rankings.trends", "GET",
    "/api/customer-rankings/{phone}/trends", F,
    "Failed to fetch customer trends",
    transport_message="Failed to fetch customer trends", forward_query=True,
)
ANALYTICS_REPORT = ProxyRoute(
    "analytics.report", "GET", "/api/analytics/{type}", D,
    "API error: {status}", transport_message="Failed to fetch analytics data",
    forward_query=True,
)


# ─── Courier ─────────────────────────────────────────────────────

COURIER_STATUS_MESSAGE = "Failed to get courier status"

COURIER_CREATE_ORDER = ProxyRoute(
    "courier.create_order", "POST", "/api/courier/create-order", P,
    transport_message="Failed to proxy courier create-order request",
    body=BodyKind.JSON,
)
COURIER_BULK_ORDER = ProxyRoute(
    "courier.bulk_order", "POST", "/api/courier/bulk-order", P,
    transport_message="Failed to communicate with courier service",
    body=BodyKind.JSON,
)
COURIER_STATUS_CONSIGNMENT = ProxyRoute(
    "courier.status.consignment", "GET",
    "/api/courier/status/consignment/{consignment_id}", P,
    transport_message=COURIER_STATUS_MESSAGE,
)
COURIER_STATUS_INVOICE = ProxyRoute(
    "courier.status.invoice", "GET", "/api/courier/status/invoice/{invoice}", P,
    transport_message=COURIER_STATUS_MESSAGE,
)
COURIER_STATUS_TRACKING = ProxyRoute(
    "courier.status.tracking", "GET",
    "/api/courier/status/tracking/{tracking_code}", P,
    transport_message=COURIER_STATUS_MESSAGE,
)


# ─── Delivery voucher ───────────────────────────────────────────

DELIVERY_TOGGLE = ProxyRoute(
    "delivery.toggle", "PATCH", "/api/delivery/{id}/toggle", D,
    "Failed to toggle delivery selection", body=BodyKind.JSON,
)
DELIVERY_CLEAR = ProxyRoute(
    "delivery.clear", "POST", "/api/delivery/clear", F,
    "Failed to clear delivery selections",
)
DELIVERY_EXPORT_JSON = ProxyRoute(
    "delivery.export.json", "GET", "/api/delivery/export", F,
    "Failed to export delivery voucher",
)
DELIVERY_EXPORT_EXCEL = ProxyRoute(
    "delivery.export.excel", "GET", "/api/delivery/export", F,
    "Failed to export delivery voucher",
    binary=BinaryRelay(XLSX_MEDIA_TYPE, "delivery-voucher.xlsx"),
)
DELIVERY_EXPORT_CSV = ProxyRoute(
    "delivery.export.csv", "GET", "/api/delivery/export", F,
    "Failed to export delivery voucher",
    binary=BinaryRelay(CSV_MEDIA_TYPE, "delivery-voucher.csv"),
)


# ─── File exports ───────────────────────────────────────────────

EXPORT_INVENTORY_EXCEL = ProxyRoute(
    "export.inventory.excel", "GET", "/api/export/inventory/excel", F,
    "Failed to export inventory to Excel",
    transport_message="Failed to export inventory to Excel", forward_query=True,
    binary=BinaryRelay(XLSX_MEDIA_TYPE, "inventory.xlsx"),
)
EXPORT_INVENTORY_PDF = ProxyRoute(
    "export.inventory.pdf", "GET", "/api/export/inventory/pdf", F,
    "Failed to export inventory to PDF",
    transport_message="Failed to export inventory to PDF", forward_query=True,
    binary=BinaryRelay(PDF_MEDIA_TYPE, "inventory.pdf"),
)
EXPORT_ORDERS_EXCEL = ProxyRoute(
    "export.orders.excel", "GET", "/api/export/orders/excel", F,
    "Failed to export orders to Excel",
    transport_message="Failed to export orders to Excel", forward_query=True,
    binary=BinaryRelay(XLSX_MEDIA_TYPE, "orders.xlsx"),
)
EXPORT_ORDERS_PDF = ProxyRoute(
    "export.orders.pdf", "GET", "/api/export/orders/pdf", F,
    "Failed to export orders to PDF",
    transport_message="Failed to export orders to PDF", forward_query=True,
    binary=BinaryRelay(PDF_MEDIA_TYPE, "orders.pdf"),
)

EXPORT_ROUTES = {
    ("inventory", "excel"): EXPORT_INVENTORY_EXCEL,
    ("inventory", "pdf"): EXPORT_INVENTORY_PDF,
    ("orders", "excel"): EXPORT_ORDERS_EXCEL,
    ("orders", "pdf"): EXPORT_ORDERS_PDF,
}

DELIVERY_EXPORT_ROUTES = {
    "json": DELIVERY_EXPORT_JSON,
    "excel": DELIVERY_EXPORT_EXCEL,
    "csv": DELIVERY_EXPORT_CSV,
}
