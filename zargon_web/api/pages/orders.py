"""Orders Page — order table, order form, delivery vouchers and courier hand-off.

Invariants:
    - The backend has no single-order GET; actions that need an order's data
      re-list the page the user was on (its return_to query) and pick it out
    - Line items send unit prices only; totals and profit come from the backend
    - Every product code on a submitted order must exist in inventory
    - Exporting a delivery voucher clears the delivery selections afterwards
    - Fixed action paths are declared before /{order_id} paths
    - Duplicating an order opens a prefilled new-order form; nothing is created
      until that form is submitted
    - Courier status checks sync the order status unless it was set by hand
"""

import logging
from typing import Any
from urllib.parse import urlsplit

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from zargon_web.api.dependencies import get_backend_client, get_gateway
from zargon_web.api.pages.common import (
    attempt,
    fetch,
    find_by_id,
    form_data,
    page_number,
    query_of,
    validated,
)
from zargon_web.api.templating import redirect, render, safe_return, url_with
from zargon_web.config import get_settings
from zargon_web.core.domain_types import (
    DeliveryExportFormat,
    ExportFormat,
    ExportRange,
    ExportType,
    OrderStatus,
    Size,
)
from zargon_web.core.errors import SessionExpiredError
from zargon_web.core.export_csv import dated_filename, delivery_voucher_csv
from zargon_web.core.formatting import courier_status_description
from zargon_web.core.proxy_routes import DELIVERY_EXPORT_EXCEL
from zargon_web.infrastructure.backend_client import ResilientBackendClient
from zargon_web.schemas.forms import checkbox
from zargon_web.schemas.orders import (
    DEFAULT_DELIVERY_CHARGE,
    ORDER_FILTER_KEYS,
    OrderForm,
    StatusChangeForm,
    already_sent,
    auto_sync_note,
    courier_delivery_status,
    courier_lookup,
    courier_problem,
    courier_sync_status,
    duplicate_payload,
    manually_overridden,
    order_query,
    zip_lines,
)
from zargon_web.services.dashboard_gateway import DashboardGateway, bearer
from zargon_web.services.proxy import forward
from zargon_web.services.session_auth import current_token, flash, require_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/dashboard/orders", tags=["pages"], include_in_schema=False)

ORDERS_PATH = "/dashboard/orders"


def _filters(params: Any) -> dict[str, str]:
    return {key: params.get(key, "") for key in ORDER_FILTER_KEYS}


async def _list_page(gateway: DashboardGateway, params: Any) -> dict:
    page = page_number(params.get("page"))
    page_size = page_number(params.get("pageSize"), get_settings().default_page_size)
    return await gateway.list_orders(order_query(_filters(params), page, page_size))


async def _find_order(
    request: Request, gateway: DashboardGateway, order_id: str, back: str,
) -> dict | None:
    result, error = await fetch(_list_page(gateway, query_of(back)), {})
    if error:
        flash(request, error, "error")
        return None
    order = find_by_id(result.get("orders") or [], order_id)
    if order is None:
        flash(request, "Order not found. Please refresh and try again.", "error")
    return order


async def _sync_from_courier(
    gateway: DashboardGateway, order: dict, delivery_status: str, overrides: Any,
) -> tuple[OrderStatus | None, str | None]:
    """Apply a courier delivery_status to ``order``: (new status, error).

    (None, None) means the status was set by hand and is left alone.
    """
    if manually_overridden(order, overrides):
        return None, None
    target = courier_sync_status(delivery_status)
    _, error = await fetch(gateway.update_order_status(
        order["_id"], target.value,
        reason_note=auto_sync_note(order, delivery_status), is_auto_sync=True,
    ))
    if error:
        return None, error
    logger.info(
        f"Order {order['_id']} synced to {target.value} "
        f"from courier status {delivery_status}",
    )
    return target, None


async def _order_payload(
    request: Request, gateway: DashboardGateway,
) -> tuple[dict | None, str]:
    """Validated backend body from the posted order form, plus the return path."""
    form = await request.form()
    fields = {k: v for k, v in form.items() if isinstance(v, str)}
    back = safe_return(fields.get("return_to"), ORDERS_PATH)
    lines = zip_lines(
        form.getlist("item_code"), form.getlist("item_size"),
        form.getlist("item_quantity"), form.getlist("item_price"),
    )
    order = validated(request, OrderForm, OrderForm.from_form(fields, lines))
    if order is None:
        return None, back

    catalog_items, error = await fetch(gateway.inventory_catalog(), [])
    if error:
        flash(request, error, "error")
        return None, back
    catalog = {item.get("finalCode"): item for item in catalog_items}
    for line in order.items:
        if line.product_code not in catalog:
            flash(
                request,
                f'Product "{line.product_code}" not found in inventory. '
                "Please select a valid product.",
                "error",
            )
            return None, back
    return order.to_payload(catalog), back


# --- Page ---

@router.get("")
async def orders_page(
    request: Request,
    user: dict = Depends(require_user),
    gateway: DashboardGateway = Depends(get_gateway),
):
    params = request.query_params
    result, error = await fetch(_list_page(gateway, params), {})
    orders = result.get("orders") or []
    pagination = result.get("pagination") or {}
    overrides, _ = await fetch(gateway.manual_overrides(), {})

    editing = find_by_id(orders, params["edit"]) if params.get("edit") else None
    duplicating = None
    if editing is None and params.get("duplicate"):
        source = find_by_id(orders, params["duplicate"])
        if source is None:
            error = error or "Order to duplicate was not found on this page."
        else:
            duplicating = duplicate_payload(source)
    show_form = (
        editing is not None or duplicating is not None or params.get("new") == "1"
    )
    catalog: list[dict] = []
    if show_form:
        catalog, catalog_error = await fetch(gateway.inventory_catalog(), [])
        error = error or catalog_error

    return render(request, "dashboard/orders.html", {
        "orders": orders,
        "filters": _filters(params),
        "pagination": {
            "page": pagination.get("page", page_number(params.get("page"))),
            "page_size": pagination.get("pageSize", get_settings().default_page_size),
            "total": pagination.get("total", len(orders)),
            "total_pages": pagination.get("totalPages", 1),
        },
        "overrides": set(overrides) if isinstance(overrides, dict) else set(),
        "editing": editing,
        "duplicating": duplicating,
        "show_form": show_form,
        "default_delivery_charge": DEFAULT_DELIVERY_CHARGE,
        "catalog": catalog,
        "statuses": [s.value for s in OrderStatus],
        "sizes": [s.value for s in Size],
        "export_type": ExportType.ORDERS.value,
        "export_formats": [f.value for f in ExportFormat],
        "export_ranges": [r.value for r in ExportRange],
        "voucher_formats": [DeliveryExportFormat.CSV.value, DeliveryExportFormat.EXCEL.value],
        "selected_count": sum(1 for o in orders if o.get("selectedForDelivery")),
        "error": error,
    })


@router.post("")
async def create_order(
    request: Request,
    user: dict = Depends(require_user),
    gateway: DashboardGateway = Depends(get_gateway),
):
    payload, back = await _order_payload(request, gateway)
    if payload is not None:
        await attempt(
            request, gateway.create_order(payload), success="Order created successfully",
        )
    return redirect(back)


# --- Delivery voucher ---

@router.post("/delivery/export")
async def export_delivery_voucher(
    request: Request,
    user: dict = Depends(require_user),
    gateway: DashboardGateway = Depends(get_gateway),
    client: ResilientBackendClient = Depends(get_backend_client),
):
    form = await form_data(request)
    back = safe_return(form.get("return_to"), ORDERS_PATH)
    fmt = form.get("format", DeliveryExportFormat.CSV.value)

    if fmt == DeliveryExportFormat.EXCEL.value:
        response = await forward(
            client, DELIVERY_EXPORT_EXCEL,
            authorization=bearer(current_token(request)),
            query={"format": fmt},
        )
        if response.status_code == 401:
            raise SessionExpiredError()
        if response.status_code >= 400:
            flash(request, "Failed to export delivery voucher. Please try again.", "error")
            return redirect(back)
        await fetch(gateway.clear_delivery())
        return response

    voucher, error = await fetch(gateway.delivery_voucher(), {})
    if error:
        flash(request, "Failed to export delivery voucher. Please try again.", "error")
        return redirect(back)
    rows = voucher.get("deliveryVoucher") or []
    if not rows:
        flash(request, "No orders selected for delivery", "info")
        return redirect(back)

    await fetch(gateway.clear_delivery())
    filename = dated_filename("delivery-voucher", "csv")
    logger.info(
        f"Delivery voucher exported: {voucher.get('totalOrders', len(rows))} orders",
    )
    return Response(
        content=delivery_voucher_csv(rows),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.post("/delivery/clear")
async def clear_delivery(
    request: Request,
    user: dict = Depends(require_user),
    gateway: DashboardGateway = Depends(get_gateway),
):
    form = await form_data(request)
    await attempt(
        request, gateway.clear_delivery(), success="Delivery selections cleared",
    )
    return redirect(safe_return(form.get("return_to"), ORDERS_PATH))


# --- Courier ---

@router.post("/courier/bulk")
async def send_bulk_to_courier(
    request: Request,
    user: dict = Depends(require_user),
    gateway: DashboardGateway = Depends(get_gateway),
):
    form = await request.form()
    back = safe_return(form.get("return_to"), ORDERS_PATH)
    selected = [str(v) for v in form.getlist("order_ids") if v]
    if not selected:
        flash(request, "Please select at least one order to send to courier.", "error")
        return redirect(back)

    result, error = await fetch(_list_page(gateway, query_of(back)), {})
    if error:
        flash(request, error, "error")
        return redirect(back)
    orders = result.get("orders") or []
    valid_ids = []
    for order_id in selected:
        order = find_by_id(orders, order_id)
        if order is None:
            flash(request, f"Order {order_id} not found. Please refresh and try again.", "error")
            return redirect(back)
        problem = courier_problem(order)
        if problem:
            flash(request, problem, "error")
            return redirect(back)
        if not already_sent(order):
            valid_ids.append(order_id)

    if not valid_ids:
        flash(request, "All selected orders have already been sent to courier service.", "info")
        return redirect(back)

    ok, outcome = await attempt(request, gateway.send_bulk_to_courier(valid_ids))
    if ok:
        outcome = outcome or {}
        sent = outcome.get("successfulOrders", 0)
        failed = outcome.get("failedOrders", 0)
        skipped = len(selected) - len(valid_ids)
        if sent:
            flash(request, f"Successfully sent {sent} order(s) to courier.", "success")
        if failed:
            flash(request, f"Failed to send {failed} order(s).", "error")
        if skipped:
            flash(request, f"{skipped} order(s) were already sent and skipped.", "info")
    return redirect(back)


@router.post("/courier/refresh")
async def refresh_courier_statuses(
    request: Request,
    user: dict = Depends(require_user),
    gateway: DashboardGateway = Depends(get_gateway),
):
    """Look up every courier-tracked order on the current page and sync its status."""
    form = await form_data(request)
    back = safe_return(form.get("return_to"), ORDERS_PATH)
    result, error = await fetch(_list_page(gateway, query_of(back)), {})
    if error:
        flash(request, error, "error")
        return redirect(back)
    tracked = [o for o in result.get("orders") or [] if courier_lookup(o) is not None]
    if not tracked:
        flash(request, "No orders on this page have been sent to courier service.", "info")
        return redirect(back)

    overrides, _ = await fetch(gateway.manual_overrides(), {})
    synced = manual = failed = 0
    for order in tracked:
        answer, error = await fetch(gateway.courier_status(*courier_lookup(order)))
        delivery_status = None if error else courier_delivery_status(answer)
        if delivery_status is None:
            failed += 1
            continue
        status, error = await _sync_from_courier(gateway, order, delivery_status, overrides)
        if error:
            failed += 1
        elif status is None:
            manual += 1
        else:
            synced += 1

    flash(request, f"Courier statuses refreshed: {synced} synced", "success" if synced else "info")
    if manual:
        flash(request, f"{manual} order(s) with a manual status were left unchanged.", "info")
    if failed:
        flash(request, f"Failed to refresh {failed} order(s).", "error")
    return redirect(back)


# --- Manual status overrides ---

@router.post("/manual-overrides/clear-all")
async def clear_all_overrides(
    request: Request,
    user: dict = Depends(require_user),
    gateway: DashboardGateway = Depends(get_gateway),
):
    form = await form_data(request)
    await attempt(
        request, gateway.clear_all_manual_overrides(),
        success="All manual status overrides cleared",
    )
    return redirect(safe_return(form.get("return_to"), ORDERS_PATH))


# --- Single order actions ---

@router.post("/{order_id}")
async def update_order(
    order_id: str,
    request: Request,
    user: dict = Depends(require_user),
    gateway: DashboardGateway = Depends(get_gateway),
):
    payload, back = await _order_payload(request, gateway)
    if payload is not None:
        await attempt(
            request, gateway.update_order(order_id, payload),
            success="Order updated successfully",
        )
    return redirect(back)


@router.post("/{order_id}/delete")
async def delete_order(
    order_id: str,
    request: Request,
    user: dict = Depends(require_user),
    gateway: DashboardGateway = Depends(get_gateway),
):
    form = await form_data(request)
    await attempt(
        request, gateway.delete_order(order_id), success="Order deleted successfully",
    )
    return redirect(safe_return(form.get("return_to"), ORDERS_PATH))


@router.post("/{order_id}/duplicate")
async def duplicate_order(
    order_id: str,
    request: Request,
    user: dict = Depends(require_user),
):
    """Open the new-order form prefilled from ``order_id`` on the same list page."""
    form = await form_data(request)
    back = safe_return(form.get("return_to"), ORDERS_PATH)
    query = {k: v for k, v in query_of(back).items() if k != "edit"}
    return redirect(url_with(urlsplit(back).path, query, new=1, duplicate=order_id))


@router.post("/{order_id}/status")
async def change_status(
    order_id: str,
    request: Request,
    user: dict = Depends(require_user),
    gateway: DashboardGateway = Depends(get_gateway),
):
    form = await form_data(request)
    back = safe_return(form.get("return_to"), ORDERS_PATH)
    change = validated(request, StatusChangeForm, form)
    if change is not None:
        await attempt(
            request, gateway.update_order_status(order_id, change.status.value),
            success=f"Order status changed to {change.status.value}",
        )
    return redirect(back)


@router.post("/{order_id}/delivery")
async def toggle_delivery(
    order_id: str,
    request: Request,
    user: dict = Depends(require_user),
    gateway: DashboardGateway = Depends(get_gateway),
):
    form = await form_data(request)
    await attempt(
        request, gateway.toggle_delivery(order_id, checkbox(form.get("selected"))),
    )
    return redirect(safe_return(form.get("return_to"), ORDERS_PATH))


@router.post("/{order_id}/courier")
async def send_to_courier(
    order_id: str,
    request: Request,
    user: dict = Depends(require_user),
    gateway: DashboardGateway = Depends(get_gateway),
):
    form = await form_data(request)
    back = safe_return(form.get("return_to"), ORDERS_PATH)
    order = await _find_order(request, gateway, order_id, back)
    if order is None:
        return redirect(back)
    problem = courier_problem(order)
    if problem is None and already_sent(order):
        problem = "This order has already been sent to courier service."
    if problem:
        flash(request, problem, "error")
        return redirect(back)
    await attempt(
        request, gateway.send_to_courier(order_id),
        success="Order sent to courier successfully",
    )
    return redirect(back)


@router.post("/{order_id}/courier-status")
async def check_courier_status(
    order_id: str,
    request: Request,
    user: dict = Depends(require_user),
    gateway: DashboardGateway = Depends(get_gateway),
):
    form = await form_data(request)
    back = safe_return(form.get("return_to"), ORDERS_PATH)
    order = await _find_order(request, gateway, order_id, back)
    if order is None:
        return redirect(back)
    lookup = courier_lookup(order)
    if lookup is None:
        flash(request, "This order has not been sent to courier service yet.", "info")
        return redirect(back)

    ok, result = await attempt(request, gateway.courier_status(*lookup))
    if not ok:
        return redirect(back)
    delivery_status = courier_delivery_status(result)
    if delivery_status is None:
        flash(request, "Invalid response from courier service", "error")
        return redirect(back)
    label = courier_status_description(delivery_status)["label"]
    flash(request, f"Courier status: {label}", "info")

    overrides, _ = await fetch(gateway.manual_overrides(), {})
    synced, error = await _sync_from_courier(gateway, order, delivery_status, overrides)
    if error:
        flash(request, error, "error")
    elif synced is None:
        flash(request, "Status was set manually, so it was not synced from the courier.", "info")
    else:
        flash(request, f"Order status synced to {synced.value}", "success")
    return redirect(back)


@router.post("/{order_id}/manual-override/clear")
async def clear_override(
    order_id: str,
    request: Request,
    user: dict = Depends(require_user),
    gateway: DashboardGateway = Depends(get_gateway),
):
    form = await form_data(request)
    await attempt(
        request, gateway.clear_manual_override(order_id),
        success="Manual status override cleared",
    )
    return redirect(safe_return(form.get("return_to"), ORDERS_PATH))
