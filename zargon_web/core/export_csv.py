"""CSV builders — delivery vouchers and stock sheets rendered from backend JSON.

Invariants:
    - Output starts with a UTF-8 BOM so spreadsheet apps detect the encoding
    - Every cell is quoted; embedded quotes are doubled (RFC 4180)
    - Missing keys render as empty cells, never "None"
"""

import csv
import io
from datetime import date
from typing import Any, Iterable

BOM = "\ufeff"

DELIVERY_HEADERS = ("Invoice", "Name", "Address", "Phone", "Amount", "Note")

INVENTORY_HEADERS = (
    "PID", "Color", "Final Code", "Size M", "Size L", "Size XL", "Size XXL",
    "Total Qty", "Buy Price (৳)", "Description", "Status", "Date Added",
)


def _cell(value: Any) -> str:
    return "" if value is None else str(value)


def write_csv(headers: Iterable[str], rows: Iterable[Iterable[Any]]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\r\n")
    writer.writerow(list(headers))
    for row in rows:
        writer.writerow([_cell(v) for v in row])
    return BOM + buf.getvalue()


def delivery_voucher_csv(voucher_rows: list[dict]) -> str:
    """CSV for the courier hand-off sheet from the backend's JSON voucher."""
    return write_csv(
        DELIVERY_HEADERS,
        ([row.get(h) for h in DELIVERY_HEADERS] for row in voucher_rows),
    )


def inventory_csv(items: list[dict]) -> str:
    def row(item: dict) -> list[Any]:
        sizes = item.get("sizes") or {}
        date_added = (item.get("dateAdded") or "")[:10]
        return [
            item.get("pid"), item.get("color"), item.get("finalCode"),
            sizes.get("M", 0), sizes.get("L", 0),
            sizes.get("XL", 0), sizes.get("XXL", 0),
            item.get("totalQty", 0), item.get("buyPrice", 0),
            item.get("description") or "",
            "Active" if item.get("isActive", True) else "Inactive",
            date_added,
        ]

    return write_csv(INVENTORY_HEADERS, (row(i) for i in items))


def dated_filename(prefix: str, ext: str, today: date | None = None) -> str:
    """``delivery-voucher-2025-01-31.csv`` style download names."""
    today = today or date.today()
    return f"{prefix}-{today.isoformat()}.{ext}"
