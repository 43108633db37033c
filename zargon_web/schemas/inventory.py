"""Inventory Schemas — stock item form and filter query.

Invariants:
    - Quantities and prices are never negative
    - to_payload() uses the backend's camelCase keys and nests sizes
    - Filter query drops empty values; any filter change resets page to 1
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from zargon_web.core.domain_types import Size
from zargon_web.schemas.forms import blank_to_none, checkbox

MAX_UPLOAD_IMAGES = 5


class InventoryForm(BaseModel):
    """Add/edit stock item form."""
    pid: int = Field(0, ge=0)
    ad: str | None = None
    color: str = Field(min_length=1)
    final_code: str = Field(min_length=1)
    size_m: int = Field(0, ge=0)
    size_l: int = Field(0, ge=0)
    size_xl: int = Field(0, ge=0)
    size_xxl: int = Field(0, ge=0)
    buy_price: float = Field(0, ge=0)
    description: str | None = None
    is_active: bool = True
    date_added: str | None = None

    @field_validator(
        "pid", "size_m", "size_l", "size_xl", "size_xxl", "buy_price",
        mode="before",
    )
    @classmethod
    def blank_number_is_zero(cls, v: Any) -> Any:
        return 0 if blank_to_none(v) is None else v

    @field_validator("ad", "description", "date_added", mode="before")
    @classmethod
    def blank_text_is_none(cls, v: Any) -> Any:
        return blank_to_none(v)

    @field_validator("color", "final_code", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("is_active", mode="before")
    @classmethod
    def parse_checkbox(cls, v: Any) -> bool:
        return v if isinstance(v, bool) else checkbox(v)

    def to_payload(self) -> dict:
        payload = {
            "pid": self.pid,
            "color": self.color,
            "finalCode": self.final_code,
            "sizes": {
                Size.M.value: self.size_m,
                Size.L.value: self.size_l,
                Size.XL.value: self.size_xl,
                Size.XXL.value: self.size_xxl,
            },
            "buyPrice": self.buy_price,
            "isActive": self.is_active,
        }
        if self.ad:
            payload["ad"] = self.ad
        if self.description is not None:
            payload["description"] = self.description
        if self.date_added:
            payload["dateAdded"] = self.date_added
        return payload


INVENTORY_FILTER_KEYS = (
    "finalCode", "color", "description", "inStockOnly", "sizeFilter", "filter",
)


def inventory_query(filters: dict[str, Any], page: int, page_size: int) -> dict[str, str]:
    """Backend query for the stock table from page filters."""
    query = {
        key: str(filters[key]) for key in INVENTORY_FILTER_KEYS
        if filters.get(key) not in (None, "", "all", False)
    }
    if query.get("inStockOnly"):
        query["inStockOnly"] = "true"
    query["page"] = str(max(page, 1))
    query["pageSize"] = str(page_size)
    return query
