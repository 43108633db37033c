"""Dashboard Navigation — role-based tab list and active-tab resolution.

Invariants:
    - Every role sees Stock, Orders and Reports first
    - Staff get Notices; admins get Notices, Analytics, Backup and Admin Panel
    - The active tab is derived from the request path alone
"""

from dataclasses import dataclass

from zargon_web.core.domain_types import UserRole


@dataclass(frozen=True)
class NavTab:
    id: str
    label: str
    href: str


BASE_TABS = (
    NavTab("stock", "Stock", "/dashboard"),
    NavTab("orders", "Orders", "/dashboard/orders"),
    NavTab("reports", "Reports", "/dashboard/reports"),
)

STAFF_TABS = (
    NavTab("notices", "Notices", "/dashboard/notices"),
)

ADMIN_TABS = (
    NavTab("notices", "Notices", "/dashboard/notices"),
    NavTab("analytics", "Analytics", "/dashboard/analytics"),
    NavTab("backup", "Backup", "/dashboard/backup"),
    NavTab("admin", "Admin Panel", "/dashboard/admin"),
)

# First match wins.
_PATH_MARKERS = (
    ("/orders", "orders"),
    ("/reports", "reports"),
    ("/notices", "notices"),
    ("/analytics", "analytics"),
    ("/backup", "backup"),
    ("/admin", "admin"),
    ("/customer-rankings", "customer-rankings"),
)


def tabs_for_role(role: str | None) -> tuple[NavTab, ...]:
    if role == UserRole.ADMIN.value:
        return BASE_TABS + ADMIN_TABS
    return BASE_TABS + STAFF_TABS


def active_tab(path: str) -> str:
    """Tab id for a dashboard path; unknown paths highlight Stock."""
    if path.rstrip("/") == "/dashboard":
        return "stock"
    for marker, tab_id in _PATH_MARKERS:
        if marker in path:
            return tab_id
    return "stock"
