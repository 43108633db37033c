"""Stock Page — inventory table with filters, item editing and product images.

Invariants:
    - Filters submit without a page number, so a filter change lands on page 1
    - Adding, editing and deleting items is admin-only
    - At most MAX_UPLOAD_IMAGES images per upload; empty file inputs are ignored
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from zargon_web.api.dependencies import get_gateway
from zargon_web.api.pages.common import (
    attempt,
    fetch,
    find_by_id,
    form_data,
    page_number,
    validated,
)
from zargon_web.api.templating import redirect, render, safe_return
from zargon_web.config import get_settings
from zargon_web.core.domain_types import ExportFormat, ExportRange, ExportType, Size
from zargon_web.core.export_csv import dated_filename, inventory_csv
from zargon_web.schemas.forms import checkbox
from zargon_web.schemas.inventory import (
    INVENTORY_FILTER_KEYS,
    MAX_UPLOAD_IMAGES,
    InventoryForm,
    inventory_query,
)
from zargon_web.services.dashboard_gateway import CATALOG_PAGE_SIZE, DashboardGateway
from zargon_web.services.session_auth import flash, require_admin, require_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/dashboard", tags=["pages"], include_in_schema=False)

STOCK_PATH = "/dashboard"


def _filters(request: Request) -> dict[str, str]:
    params = request.query_params
    filters = {key: params.get(key, "") for key in INVENTORY_FILTER_KEYS}
    filters["inStockOnly"] = "true" if checkbox(params.get("inStockOnly")) else ""
    return filters


@router.get("")
async def stock_page(
    request: Request,
    user: dict = Depends(require_user),
    gateway: DashboardGateway = Depends(get_gateway),
):
    settings = get_settings()
    params = request.query_params
    filters = _filters(request)
    page = page_number(params.get("page"))
    page_size = page_number(params.get("pageSize"), settings.default_page_size)

    result, error = await fetch(
        gateway.list_inventory(inventory_query(filters, page, page_size)), {},
    )
    items = result.get("data") or []
    editing = find_by_id(items, params["edit"]) if params.get("edit") else None

    return render(request, "dashboard/stock.html", {
        "items": items,
        "filters": filters,
        "pagination": {
            "page": result.get("page", page),
            "page_size": result.get("pageSize", page_size),
            "total": result.get("total", len(items)),
            "total_pages": result.get("totalPages", 1),
        },
        "editing": editing,
        "show_form": editing is not None or params.get("new") == "1",
        "sizes": [s.value for s in Size],
        "max_images": MAX_UPLOAD_IMAGES,
        "export_type": ExportType.INVENTORY.value,
        "export_formats": [f.value for f in ExportFormat],
        "export_ranges": [r.value for r in ExportRange],
        "error": error,
    })


@router.post("/inventory")
async def create_item(
    request: Request,
    user: dict = Depends(require_admin),
    gateway: DashboardGateway = Depends(get_gateway),
):
    form = await form_data(request)
    back = safe_return(form.get("return_to"), STOCK_PATH)
    item = validated(request, InventoryForm, form)
    if item is None:
        return redirect(back)
    await attempt(
        request, gateway.create_inventory(item.to_payload()),
        success="Product added successfully",
    )
    return redirect(back)


@router.post("/inventory/{item_id}")
async def update_item(
    item_id: str,
    request: Request,
    user: dict = Depends(require_admin),
    gateway: DashboardGateway = Depends(get_gateway),
):
    form = await form_data(request)
    back = safe_return(form.get("return_to"), STOCK_PATH)
    item = validated(request, InventoryForm, form)
    if item is None:
        return redirect(back)
    await attempt(
        request, gateway.update_inventory(item_id, item.to_payload()),
        success="Product updated successfully",
    )
    return redirect(back)


@router.post("/inventory/{item_id}/delete")
async def delete_item(
    item_id: str,
    request: Request,
    user: dict = Depends(require_admin),
    gateway: DashboardGateway = Depends(get_gateway),
):
    form = await form_data(request)
    await attempt(
        request, gateway.delete_inventory(item_id),
        success="Product deleted successfully",
    )
    return redirect(safe_return(form.get("return_to"), STOCK_PATH))


@router.post("/inventory/{item_id}/images")
async def upload_item_images(
    item_id: str,
    request: Request,
    user: dict = Depends(require_user),
    gateway: DashboardGateway = Depends(get_gateway),
):
    form = await request.form()
    back = safe_return(form.get("return_to"), STOCK_PATH)
    uploads = [f for f in form.getlist("images") if getattr(f, "filename", "")]
    if not uploads:
        flash(request, "Please choose at least one image", "error")
        return redirect(back)
    if len(uploads) > MAX_UPLOAD_IMAGES:
        flash(request, f"You can upload up to {MAX_UPLOAD_IMAGES} images at a time", "error")
        return redirect(back)

    files = [
        ("images", (upload.filename, await upload.read(), upload.content_type))
        for upload in uploads
    ]
    await attempt(
        request, gateway.upload_images(item_id, files),
        success=f"{len(files)} image(s) uploaded",
    )
    return redirect(back)


@router.post("/inventory/{item_id}/images/delete")
async def remove_item_image(
    item_id: str,
    request: Request,
    user: dict = Depends(require_user),
    gateway: DashboardGateway = Depends(get_gateway),
):
    form = await form_data(request)
    back = safe_return(form.get("return_to"), STOCK_PATH)
    image_url = form.get("image_url", "")
    if not image_url:
        flash(request, "No image selected", "error")
        return redirect(back)
    await attempt(
        request, gateway.remove_image(item_id, image_url), success="Image removed",
    )
    return redirect(back)


@router.get("/stock.csv")
async def stock_csv(
    request: Request,
    user: dict = Depends(require_user),
    gateway: DashboardGateway = Depends(get_gateway),
):
    """The filtered stock list as CSV.

    Only the first inventory page is exported, so the file holds at most
    CATALOG_PAGE_SIZE (1000) rows.
    """
    query = inventory_query(_filters(request), 1, CATALOG_PAGE_SIZE)
    result, error = await fetch(gateway.list_inventory(query), None)
    if error:
        flash(request, error, "error")
        return redirect(safe_return(request.query_params.get("return_to"), STOCK_PATH))
    filename = dated_filename("inventory", "csv")
    return Response(
        content=inventory_csv((result or {}).get("data") or []),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
