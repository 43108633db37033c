"""Stock page tests — inventory table, item form actions, images and CSV.

Invariants:
    - Filters and paging go to the backend as query parameters
    - Item create/edit/delete are admin-only; staff can manage images
    - Backend failures become flash messages, never 500s

Tests cover:
    - Page render with filters and inline backend error
    - Create with validation failure and success
    - Image upload limits and multipart relay
    - Stock CSV download
"""

import httpx

INVENTORY = {
    "data": [{
        "_id": "i1", "pid": 7, "color": "Black", "finalCode": "BLK-7",
        "sizes": {"M": 2, "L": 1, "XL": 0, "XXL": 0}, "totalQty": 3,
        "buyPrice": 350, "isActive": True, "images": ["https://cdn/x.jpg"],
    }],
    "page": 2, "pageSize": 20, "total": 21, "totalPages": 2,
}


# --- Page ---

async def test_stock_page_lists_items_and_sends_filters(client, backend, admin):
    backend.on("GET", "/api/inventory", json=INVENTORY)
    res = await client.get("/dashboard?page=2&color=Black&inStockOnly=true")
    assert res.status_code == 200
    assert "BLK-7" in res.text
    assert "Page 2 of 2" in res.text
    params = backend.last("GET", "/api/inventory").url.params
    assert params["page"] == "2"
    assert params["color"] == "Black"
    assert params["inStockOnly"] == "true"
    assert "finalCode" not in params


async def test_stock_page_shows_admin_controls_only_to_admin(client, backend, staff):
    backend.on("GET", "/api/inventory", json=INVENTORY)
    res = await client.get("/dashboard")
    assert res.status_code == 200
    assert "Add product" not in res.text
    assert "/dashboard/inventory/i1/images" in res.text


async def test_stock_page_backend_error_inline(client, backend, admin):
    backend.on("GET", "/api/inventory", status=500, json={"error": {"message": "DB down"}})
    res = await client.get("/dashboard")
    assert res.status_code == 200
    assert "DB down" in res.text
    assert "No products found." in res.text


async def test_stock_page_edit_form_prefilled(client, backend, admin):
    backend.on("GET", "/api/inventory", json=INVENTORY)
    res = await client.get("/dashboard?edit=i1")
    assert 'action="/dashboard/inventory/i1"' in res.text
    assert "Edit product" in res.text


# --- Item actions ---

async def test_create_item_validation_error_flashes(client, backend, admin, flashes):
    res = await client.post("/dashboard/inventory", data={"color": "", "final_code": "X"})
    assert res.status_code == 303
    assert res.headers["location"] == "/dashboard"
    assert backend.requests_to("POST", "/api/inventory") == []
    assert len(flashes()) == 2


async def test_create_item_posts_payload(client, backend, admin, flashes):
    backend.on("POST", "/api/inventory", status=201, json={"_id": "i2"})
    res = await client.post("/dashboard/inventory", data={
        "pid": "8", "color": "Red", "final_code": "RED-8", "size_m": "4",
        "buy_price": "300", "is_active": "on", "return_to": "/dashboard?page=3",
    })
    assert res.headers["location"] == "/dashboard?page=3"
    body = backend.body(backend.last("POST", "/api/inventory"))
    assert body["finalCode"] == "RED-8"
    assert body["sizes"] == {"M": 4, "L": 0, "XL": 0, "XXL": 0}
    assert "Product added successfully" in flashes()


async def test_create_item_backend_rejection_flashes_message(client, backend, admin, flashes):
    backend.on(
        "POST", "/api/inventory", status=400,
        json={"error": {"message": "Final code already exists"}},
    )
    await client.post("/dashboard/inventory", data={"color": "Red", "final_code": "RED-8"})
    assert "Final code already exists" in flashes()


async def test_staff_cannot_delete_item(client, backend, staff):
    res = await client.post("/dashboard/inventory/i1/delete")
    assert res.headers["location"] == "/dashboard"
    assert backend.requests_to("DELETE", "/api/inventory/i1") == []


async def test_delete_item(client, backend, admin, flashes):
    backend.on("DELETE", "/api/inventory/i1", json={"success": True})
    await client.post("/dashboard/inventory/i1/delete")
    assert "Product deleted successfully" in flashes()


# --- Images ---

async def test_upload_requires_a_file(client, backend, staff, flashes):
    res = await client.post(
        "/dashboard/inventory/i1/images",
        files=[("images", ("", b"", "application/octet-stream"))],
    )
    assert res.status_code == 303
    assert "Please choose at least one image" in flashes()
    assert backend.requests_to("POST", "/api/inventory/i1/images") == []


async def test_upload_limit(client, backend, staff, flashes):
    files = [("images", (f"{i}.jpg", b"img", "image/jpeg")) for i in range(6)]
    await client.post("/dashboard/inventory/i1/images", files=files)
    assert "You can upload up to 5 images at a time" in flashes()
    assert backend.requests_to("POST", "/api/inventory/i1/images") == []


async def test_upload_relays_files(client, backend, staff, flashes):
    backend.on("POST", "/api/inventory/i1/images", json={"images": ["a", "b"]})
    await client.post(
        "/dashboard/inventory/i1/images",
        files=[
            ("images", ("a.jpg", b"AAA", "image/jpeg")),
            ("images", ("b.png", b"BBB", "image/png")),
        ],
        data={"return_to": "/dashboard"},
    )
    sent = backend.last("POST", "/api/inventory/i1/images")
    assert b"a.jpg" in sent.content and b"BBB" in sent.content
    assert sent.headers["authorization"] == "Bearer tok-123"
    assert "2 image(s) uploaded" in flashes()


async def test_remove_image(client, backend, staff, flashes):
    backend.on("DELETE", "/api/inventory/i1/images", json={"images": []})
    await client.post(
        "/dashboard/inventory/i1/images/delete", data={"image_url": "https://cdn/x.jpg"},
    )
    sent = backend.last("DELETE", "/api/inventory/i1/images")
    assert backend.body(sent) == {"imageUrl": "https://cdn/x.jpg"}
    assert "Image removed" in flashes()


# --- CSV ---

async def test_stock_csv_download(client, backend, staff):
    backend.on("GET", "/api/inventory", json=INVENTORY)
    res = await client.get("/dashboard/stock.csv?color=Black")
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/csv")
    assert "attachment; filename=inventory-" in res.headers["content-disposition"]
    assert '"BLK-7"' in res.text
    params = backend.last("GET", "/api/inventory").url.params
    assert params["pageSize"] == "1000"
    assert params["color"] == "Black"


async def test_stock_csv_backend_down_redirects(client, backend, staff, flashes):
    backend.fail("GET", "/api/inventory", httpx.ConnectError("refused"))
    res = await client.get("/dashboard/stock.csv")
    assert res.status_code == 303
    assert "Cannot connect to server. Please try again in a moment." in flashes()
