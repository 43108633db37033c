"""Order Schemas — multi-line order form, status change and duplication.

Invariants:
    - Phone and at least one line item are required; blank name/address become "demo"
    - Line items carry productCode, size, quantity and unit prices only; totals
      and profit are left to the backend
    - A missing selling price falls back to the product's buying price
    - Duplicated orders start as PENDING with an empty reason note
    - New orders default to a delivery charge of DEFAULT_DELIVERY_CHARGE
    - Courier sync maps delivered to PAID and cancelled to CAN; any other status is PENDING
"""

from typing import Any, Mapping, Sequence

from pydantic import BaseModel, Field, field_validator

from zargon_web.core.domain_types import OrderStatus, Size
from zargon_web.schemas.forms import blank_to_none

DEFAULT_CUSTOMER_TEXT = "demo"
DEFAULT_DELIVERY_CHARGE = 60

ORDER_FILTER_KEYS = (
    "qName", "qAddress", "phone", "code", "reason", "status", "dateFrom", "dateTo",
)


class OrderLineForm(BaseModel):
    product_code: str = Field(min_length=1)
    size: Size
    quantity: int = Field(gt=0)
    unit_selling_price: float | None = Field(None, ge=0)

    @field_validator("product_code", mode="before")
    @classmethod
    def strip_code(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("unit_selling_price", mode="before")
    @classmethod
    def blank_price(cls, v: Any) -> Any:
        return blank_to_none(v)


class OrderForm(BaseModel):
    """Create/edit order form."""
    name: str = DEFAULT_CUSTOMER_TEXT
    address: str = DEFAULT_CUSTOMER_TEXT
    phone: str
    items: list[OrderLineForm]
    delivery_charge: float = Field(DEFAULT_DELIVERY_CHARGE, ge=0)
    status: OrderStatus = OrderStatus.PENDING
    order_date: str | None = None
    reason_note: str | None = None

    @field_validator("name", "address", mode="before")
    @classmethod
    def default_demo(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_CUSTOMER_TEXT
        return v.strip() if isinstance(v, str) else v

    @field_validator("phone", mode="before")
    @classmethod
    def require_phone(cls, v: Any) -> Any:
        v = v.strip() if isinstance(v, str) else v
        if not v:
            raise ValueError("Please enter a phone number")
        return v

    @field_validator("items")
    @classmethod
    def require_items(cls, v: list) -> list:
        if not v:
            raise ValueError("Please add at least one item to the order")
        return v

    @field_validator("delivery_charge", mode="before")
    @classmethod
    def blank_charge(cls, v: Any) -> Any:
        return DEFAULT_DELIVERY_CHARGE if blank_to_none(v) is None else v

    @field_validator("order_date", "reason_note", mode="before")
    @classmethod
    def blank_optional(cls, v: Any) -> Any:
        return blank_to_none(v)

    @classmethod
    def from_form(cls, form: Mapping[str, Any], lines: Sequence[Mapping[str, Any]]) -> dict:
        """Raw dict for validation from scalar fields plus parallel line inputs."""
        return {
            "name": form.get("name"),
            "address": form.get("address"),
            "phone": form.get("phone") or "",
            "delivery_charge": form.get("delivery_charge"),
            "status": form.get("status") or OrderStatus.PENDING.value,
            "order_date": form.get("order_date"),
            "reason_note": form.get("reason_note"),
            "items": [line for line in lines if any(line.values())],
        }

    def to_payload(self, catalog: Mapping[str, dict]) -> dict:
        """Backend body; ``catalog`` maps finalCode to its inventory item."""
        items = []
        for line in self.items:
            buying = float((catalog.get(line.product_code) or {}).get("buyPrice") or 0)
            selling = (
                line.unit_selling_price if line.unit_selling_price is not None
                else buying
            )
            items.append({
                "productCode": line.product_code,
                "size": line.size.value,
                "quantity": line.quantity,
                "unitSellingPrice": selling,
                "unitBuyingPrice": buying,
            })
        payload: dict[str, Any] = {
            "name": self.name,
            "address": self.address,
            "phone": self.phone,
            "items": items,
            "deliveryCharge": self.delivery_charge,
            "status": self.status.value,
        }
        if self.order_date:
            payload["orderDate"] = self.order_date
        if self.reason_note is not None:
            payload["reasonNote"] = self.reason_note
        return payload


def zip_lines(
    codes: Sequence[str], sizes: Sequence[str],
    quantities: Sequence[str], prices: Sequence[str],
) -> list[dict]:
    """Parallel ``item_*`` form lists into line dicts."""
    count = max(len(codes), len(sizes), len(quantities), len(prices), 0)

    def at(seq: Sequence[str], i: int) -> str:
        return seq[i] if i < len(seq) else ""

    return [
        {
            "product_code": at(codes, i),
            "size": at(sizes, i),
            "quantity": at(quantities, i),
            "unit_selling_price": at(prices, i),
        }
        for i in range(count)
    ]


class StatusChangeForm(BaseModel):
    status: OrderStatus


def duplicate_payload(order: dict) -> dict:
    """Prefill for a new order copied from ``order``: same customer and items, PENDING."""
    return {
        "name": order.get("name") or DEFAULT_CUSTOMER_TEXT,
        "address": order.get("address") or DEFAULT_CUSTOMER_TEXT,
        "phone": order.get("phone") or "",
        "items": [
            {
                "productCode": item.get("productCode"),
                "size": item.get("size"),
                "quantity": item.get("quantity"),
                "unitSellingPrice": item.get("unitSellingPrice"),
                "unitBuyingPrice": item.get("unitBuyingPrice"),
            }
            for item in order.get("items") or []
        ],
        "deliveryCharge": order.get("deliveryCharge") or DEFAULT_DELIVERY_CHARGE,
        "status": OrderStatus.PENDING.value,
        "reasonNote": "",
    }


def order_query(filters: dict[str, Any], page: int, page_size: int) -> dict[str, str]:
    query = {
        key: str(filters[key]) for key in ORDER_FILTER_KEYS
        if filters.get(key) not in (None, "", "all")
    }
    query["page"] = str(max(page, 1))
    query["pageSize"] = str(page_size)
    return query


def courier_lookup(order: dict) -> tuple[str, str] | None:
    """(kind, value) for a courier status lookup: consignment, else tracking, else invoice."""
    if order.get("courierConsignmentId"):
        return "consignment", str(order["courierConsignmentId"])
    if order.get("courierTrackingCode"):
        return "tracking", str(order["courierTrackingCode"])
    if order.get("courierInvoice"):
        return "invoice", str(order["courierInvoice"])
    return None


MIN_COURIER_PHONE_DIGITS = 10


def already_sent(order: dict) -> bool:
    return order.get("courierStatus") == "sent"


def courier_problem(order: dict) -> str | None:
    """Why ``order`` cannot be handed to the courier, or None if it can."""
    label = order.get("orderNumber") or order.get("_id")
    if already_sent(order) and order.get("courierTrackingCode"):
        return (
            f"Order {label} has already been sent via courier. "
            f"Tracking: {order['courierTrackingCode']}"
        )
    phone = order.get("phone") or ""
    if not phone:
        return f"Order {label} is missing customer phone number, which is required for courier service."
    if not order.get("address"):
        return f"Order {label} is missing customer address, which is required for courier service."
    if sum(ch.isdigit() for ch in phone) < MIN_COURIER_PHONE_DIGITS:
        return f"Order {label} has invalid phone number format. Must be at least 10 digits."
    return None


# --- Courier status sync ---

COURIER_SYNC_STATUS = {
    "delivered": OrderStatus.PAID,
    "pending": OrderStatus.PENDING,
    "cancelled": OrderStatus.CANCELLED,
    "canceled": OrderStatus.CANCELLED,
}


def courier_sync_status(delivery_status: Any) -> OrderStatus:
    """Order status implied by a courier delivery_status (case-insensitive)."""
    return COURIER_SYNC_STATUS.get(str(delivery_status or "").lower(), OrderStatus.PENDING)


def auto_sync_note(order: dict, delivery_status: Any) -> str:
    """Keep the order's own reason note; otherwise record where the status came from."""
    existing = order.get("reasonNote")
    if isinstance(existing, str) and existing.strip():
        return existing
    return f"Auto-synced from API status: {delivery_status}"


def manually_overridden(order: dict, overrides: Any) -> bool:
    """True when a person set this order's status by hand; courier sync leaves it alone."""
    if order.get("manualStatusOverride"):
        return True
    return isinstance(overrides, dict) and order.get("_id") in overrides


def courier_delivery_status(result: Any) -> str | None:
    """delivery_status from a courier status answer, or None when it carries no data."""
    if not isinstance(result, dict) or result.get("success") is False:
        return None
    data = result.get("data")
    if not isinstance(data, dict) or not data.get("delivery_status"):
        return None
    return str(data["delivery_status"])
