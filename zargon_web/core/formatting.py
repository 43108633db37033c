"""Presentational helpers — pure formatting used by the dashboard templates.

Invariants:
    - Functions never raise on odd backend values; unknown input falls back
      to a neutral label/style
    - CSS class names here are the only ones templates use for badges
"""

from datetime import datetime, timezone
from typing import Any

from zargon_web.core.domain_types import ConnectionState, CustomerTier

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")
NEUTRAL_STYLE = "badge-neutral"


def format_file_size(size: Any) -> str:
    """Human readable byte count: ``0 Byte``, ``512 Bytes``, ``1.5 KB``."""
    try:
        num = float(size)
    except (TypeError, ValueError):
        return "0 Byte"
    if num <= 0:
        return "0 Byte"
    exponent = 0
    while num >= 1024 and exponent < len(_SIZE_UNITS) - 1:
        num /= 1024
        exponent += 1
    value = round(num, 2)
    if value == int(value):
        value = int(value)
    return f"{value} {_SIZE_UNITS[exponent]}"


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a backend ISO timestamp (``...Z`` accepted) into an aware datetime."""
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and value:
        try:
            dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_time_ago(value: Any, now: datetime | None = None) -> str:
    dt = parse_timestamp(value)
    if dt is None:
        return "Unknown"
    now = now or datetime.now(timezone.utc)
    hours = int((now - dt).total_seconds() // 3600)
    days = hours // 24
    if days > 0:
        return f"{days} day{'s' if days > 1 else ''} ago"
    if hours > 0:
        return f"{hours} hour{'s' if hours > 1 else ''} ago"
    return "Less than 1 hour ago"


def format_date(value: Any, fmt: str = "%Y-%m-%d") -> str:
    dt = parse_timestamp(value)
    return dt.strftime(fmt) if dt else ""


def format_currency(value: Any, symbol: str = "৳") -> str:
    """Taka amount with thousands separators; fractions kept only when present."""
    try:
        num = float(value or 0)
    except (TypeError, ValueError):
        num = 0.0
    if num == int(num):
        return f"{symbol}{int(num):,}"
    return f"{symbol}{num:,.2f}"


# ─── Badges ──────────────────────────────────────────────────────

ORDER_STATUS_STYLES = {
    "Phone": "badge-phone",
    "DITC": "badge-ditc",
    "Phone Off": "badge-cancelled",
    "PAID": "badge-paid",
    "Partial Delivered": "badge-partial",
    "CAN": "badge-cancelled",
    "HOLD": "badge-hold",
    "Exchange": "badge-exchange",
    "PENDING": "badge-pending",
}


def order_status_style(status: str | None) -> str:
    return ORDER_STATUS_STYLES.get(status or "", NEUTRAL_STYLE)


COURIER_STATUSES = {
    "pending": ("Pending", "badge-yellow"),
    "delivered_approval_pending": ("Delivered (Approval Pending)", "badge-blue"),
    "partial_delivered_approval_pending": ("Partial Delivered (Approval Pending)", "badge-blue"),
    "cancelled_approval_pending": ("Cancelled (Approval Pending)", "badge-orange"),
    "unknown_approval_pending": ("Unknown (Approval Pending)", NEUTRAL_STYLE),
    "delivered": ("Delivered", "badge-green"),
    "partial_delivered": ("Partially Delivered", "badge-green"),
    "cancelled": ("Cancelled", "badge-red"),
    "hold": ("On Hold", "badge-orange"),
    "in_review": ("In Review", "badge-blue"),
    "unknown": ("Unknown Status", NEUTRAL_STYLE),
}


def courier_status_description(status: str | None) -> dict[str, str]:
    """Human label and badge style for a courier delivery status."""
    if status in COURIER_STATUSES:
        label, style = COURIER_STATUSES[status]
        return {"label": label, "style": style}
    return {"label": status or "Unknown", "style": NEUTRAL_STYLE}


NOTICE_PRIORITY_STYLES = {
    "urgent": "notice-urgent",
    "high": "notice-high",
    "medium": "notice-medium",
    "low": "notice-low",
}
NOTICE_PRIORITY_ORDER = {"urgent": 0, "high": 1, "medium": 2, "low": 3}


def notice_style(priority: str | None) -> str:
    return NOTICE_PRIORITY_STYLES.get(priority or "", "notice-default")


TIER_STYLES = {
    CustomerTier.DIAMOND: "tier-diamond",
    CustomerTier.PLATINUM: "tier-platinum",
    CustomerTier.GOLD: "tier-gold",
    CustomerTier.SILVER: "tier-silver",
    CustomerTier.BRONZE: "tier-bronze",
}


def tier_style(tier: str | None) -> str:
    return TIER_STYLES.get(tier or "", NEUTRAL_STYLE)


_CONNECTION_LABELS = {
    ConnectionState.DISCONNECTED: ("Disconnected", "state-down"),
    ConnectionState.CONNECTED: ("Connected", "state-up"),
    ConnectionState.CONNECTING: ("Connecting", "state-pending"),
    ConnectionState.DISCONNECTING: ("Disconnecting", "state-leaving"),
}


def connection_state(ready_state: Any) -> dict[str, str]:
    """Label and style for a driver readyState; unknown values read as down."""
    try:
        state = ConnectionState(int(ready_state))
    except (TypeError, ValueError):
        state = ConnectionState.DISCONNECTED
    label, style = _CONNECTION_LABELS[state]
    return {"label": label, "style": style}


def stock_style(total_qty: Any, low_threshold: int = 5) -> str:
    try:
        qty = int(total_qty or 0)
    except (TypeError, ValueError):
        qty = 0
    if qty <= 0:
        return "badge-red"
    if qty <= low_threshold:
        return "badge-yellow"
    return "badge-green"
