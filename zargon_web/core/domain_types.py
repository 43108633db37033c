"""Domain Types — enums that replace bare strings across proxy and dashboard code.

Invariants:
    - All valid states encoded as Enums — no raw string matching in pages
    - Values match the backend's wire strings exactly

Design Decisions:
    - str Enums: serialize to JSON and render in templates without converters
"""

from enum import Enum


# ─── Enums ───────────────────────────────────────────────────────

class UserRole(str, Enum):
    ADMIN = "admin"
    STAFF = "staff"


class Size(str, Enum):
    """Garment sizes tracked per inventory item."""
    M = "M"
    L = "L"
    XL = "XL"
    XXL = "XXL"


class OrderStatus(str, Enum):
    """Order lifecycle states as stored by the backend."""
    PHONE = "Phone"
    DITC = "DITC"
    PHONE_OFF = "Phone Off"
    PAID = "PAID"
    PARTIAL_DELIVERED = "Partial Delivered"
    CANCELLED = "CAN"
    HOLD = "HOLD"
    EXCHANGE = "Exchange"
    PENDING = "PENDING"


class NoticePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class BackupType(str, Enum):
    FULL = "full"
    INCREMENTAL = "incremental"


class DatabaseTarget(str, Enum):
    PRIMARY = "primary"
    MIRROR = "mirror"


class ConnectionState(int, Enum):
    """Driver connection states reported by the backend database manager."""
    DISCONNECTED = 0
    CONNECTED = 1
    CONNECTING = 2
    DISCONNECTING = 3


class AnalyticsType(str, Enum):
    """Backend analytics report endpoints."""
    ABC = "abc-analysis"
    FORECAST = "demand-forecast"
    CUSTOMER = "customer-analytics"
    FINANCIAL = "financial-analytics"


class AnalyticsTab(str, Enum):
    """Analytics dashboard tabs; liquidity is derived from financial data."""
    FINANCIAL = "financial"
    ABC = "abc"
    FORECAST = "forecast"
    CUSTOMER = "customer"
    LIQUIDITY = "liquidity"

    @property
    def report(self) -> AnalyticsType:
        return _TAB_REPORTS[self]


_TAB_REPORTS = {
    AnalyticsTab.FINANCIAL: AnalyticsType.FINANCIAL,
    AnalyticsTab.ABC: AnalyticsType.ABC,
    AnalyticsTab.FORECAST: AnalyticsType.FORECAST,
    AnalyticsTab.CUSTOMER: AnalyticsType.CUSTOMER,
    AnalyticsTab.LIQUIDITY: AnalyticsType.FINANCIAL,
}


class AnalyticsPeriod(str, Enum):
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"
    CUSTOM = "custom"


class ExportType(str, Enum):
    INVENTORY = "inventory"
    ORDERS = "orders"


class ExportFormat(str, Enum):
    EXCEL = "excel"
    PDF = "pdf"


class ExportRange(str, Enum):
    WEEK = "week"
    MONTH = "month"
    CUSTOM = "custom"


class DeliveryExportFormat(str, Enum):
    JSON = "json"
    EXCEL = "excel"
    CSV = "csv"


class RankingTimespan(str, Enum):
    DAYS_30 = "30"
    DAYS_90 = "90"
    DAYS_180 = "180"
    DAYS_365 = "365"
    ALL = "all"


class RankingTab(str, Enum):
    OVERALL = "overall"
    VOLUME = "volume"
    FREQUENCY = "frequency"


class CustomerTier(str, Enum):
    DIAMOND = "Diamond"
    PLATINUM = "Platinum"
    GOLD = "Gold"
    SILVER = "Silver"
    BRONZE = "Bronze"
