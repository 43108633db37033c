"""Order schema tests — order form, line zipping, duplication and courier checks.

Tests cover:
    - Blank name/address default to "demo"; phone and items required
    - Selling price falls back to the catalog buying price
    - zip_lines pads ragged inputs; empty lines are dropped
    - duplicate_payload resets status to PENDING and defaults the delivery charge
    - Delivery charge defaults to 60 when left blank
    - courier_problem messages in the order they are checked
    - Courier status sync mapping, note and override checks
"""

import pytest

from zargon_web.core.errors import FormValidationError
from zargon_web.schemas.forms import validate_form
from zargon_web.schemas.orders import (
    OrderForm,
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

CATALOG = {"BLK-7": {"finalCode": "BLK-7", "buyPrice": 350}}


def _form(**fields):
    base = {"phone": "01711111111"}
    base.update(fields)
    return base


def _line(code="BLK-7", size="M", quantity="2", price="900"):
    return {
        "product_code": code, "size": size,
        "quantity": quantity, "unit_selling_price": price,
    }


# -- OrderForm -----------------------------------------------------------------

def test_blank_name_and_address_default_to_demo():
    order = validate_form(OrderForm, OrderForm.from_form(
        _form(name="  ", address=""), [_line()],
    ))
    assert order.name == "demo"
    assert order.address == "demo"


def test_phone_required():
    with pytest.raises(FormValidationError) as exc:
        validate_form(OrderForm, OrderForm.from_form({"phone": " "}, [_line()]))
    assert exc.value.message == "Please enter a phone number"


def test_at_least_one_item_required():
    with pytest.raises(FormValidationError) as exc:
        validate_form(OrderForm, OrderForm.from_form(_form(), [_line("", "", "", "")]))
    assert exc.value.message == "Please add at least one item to the order"


def test_quantity_must_be_positive():
    with pytest.raises(FormValidationError) as exc:
        validate_form(OrderForm, OrderForm.from_form(_form(), [_line(quantity="0")]))
    assert exc.value.field == "items.0.quantity"


def test_payload_sends_unit_prices_only():
    order = validate_form(OrderForm, OrderForm.from_form(
        _form(delivery_charge="60", reason_note="gift"), [_line()],
    ))
    payload = order.to_payload(CATALOG)
    assert payload["items"] == [{
        "productCode": "BLK-7", "size": "M", "quantity": 2,
        "unitSellingPrice": 900.0, "unitBuyingPrice": 350.0,
    }]
    assert payload["deliveryCharge"] == 60
    assert payload["status"] == "PENDING"
    assert payload["reasonNote"] == "gift"
    assert "orderDate" not in payload
    assert "totalAmount" not in payload


def test_blank_delivery_charge_defaults_to_60():
    order = validate_form(OrderForm, OrderForm.from_form(_form(delivery_charge=""), [_line()]))
    assert order.to_payload(CATALOG)["deliveryCharge"] == 60


def test_zero_delivery_charge_is_kept():
    order = validate_form(OrderForm, OrderForm.from_form(_form(delivery_charge="0"), [_line()]))
    assert order.to_payload(CATALOG)["deliveryCharge"] == 0


def test_selling_price_falls_back_to_buying_price():
    order = validate_form(OrderForm, OrderForm.from_form(_form(), [_line(price="")]))
    assert order.to_payload(CATALOG)["items"][0]["unitSellingPrice"] == 350.0


def test_zip_lines_pads_ragged_lists():
    lines = zip_lines(["A", "B"], ["M"], ["1", "2"], [])
    assert lines[1] == {
        "product_code": "B", "size": "", "quantity": "2", "unit_selling_price": "",
    }


# -- Duplication and queries ---------------------------------------------------

def test_duplicate_payload_resets_status():
    payload = duplicate_payload({
        "_id": "o1", "orderNumber": "ZG-1", "name": "Karim", "address": "",
        "phone": "017", "status": "PAID", "deliveryCharge": 80,
        "items": [{"productCode": "BLK-7", "size": "L", "quantity": 1,
                   "unitSellingPrice": 900, "unitBuyingPrice": 350, "profit": 550}],
    })
    assert payload["status"] == "PENDING"
    assert payload["address"] == "demo"
    assert "_id" not in payload and "orderNumber" not in payload
    assert "profit" not in payload["items"][0]
    assert payload["deliveryCharge"] == 80
    assert payload["reasonNote"] == ""


def test_duplicate_payload_defaults_delivery_charge():
    assert duplicate_payload({"phone": "017", "deliveryCharge": 0})["deliveryCharge"] == 60


def test_order_query_drops_empty_and_all():
    query = order_query({"status": "all", "phone": "017", "code": ""}, 0, 20)
    assert query == {"phone": "017", "page": "1", "pageSize": "20"}


# -- Courier checks ------------------------------------------------------------

def _order(**fields):
    base = {"_id": "o1", "orderNumber": "ZG-1", "phone": "01711111111", "address": "Dhaka"}
    base.update(fields)
    return base


def test_valid_order_has_no_courier_problem():
    assert courier_problem(_order()) is None


def test_already_sent_with_tracking_is_a_problem():
    problem = courier_problem(_order(courierStatus="sent", courierTrackingCode="TRK9"))
    assert problem == "Order ZG-1 has already been sent via courier. Tracking: TRK9"


def test_missing_phone_checked_before_address():
    problem = courier_problem(_order(phone="", address=""))
    assert "missing customer phone number" in problem


def test_missing_address():
    assert "missing customer address" in courier_problem(_order(address=""))


def test_short_phone_rejected():
    problem = courier_problem(_order(phone="+880-171"))
    assert problem == "Order ZG-1 has invalid phone number format. Must be at least 10 digits."


def test_already_sent_without_tracking_is_not_a_problem_but_is_sent():
    order = _order(courierStatus="sent")
    assert courier_problem(order) is None
    assert already_sent(order)


def test_courier_lookup_preference():
    assert courier_lookup(_order(courierConsignmentId=55, courierInvoice="I")) == (
        "consignment", "55",
    )
    assert courier_lookup(_order(courierTrackingCode="T", courierInvoice="I")) == (
        "tracking", "T",
    )
    assert courier_lookup(_order(courierInvoice="I")) == ("invoice", "I")
    assert courier_lookup(_order()) is None


# -- Courier status sync -------------------------------------------------------

@pytest.mark.parametrize("delivery_status,expected", [
    ("delivered", "PAID"),
    ("DELIVERED", "PAID"),
    ("pending", "PENDING"),
    ("cancelled", "CAN"),
    ("Canceled", "CAN"),
    ("in_review", "PENDING"),
    (None, "PENDING"),
])
def test_courier_sync_status(delivery_status, expected):
    assert courier_sync_status(delivery_status).value == expected


def test_auto_sync_note_keeps_existing_note():
    assert auto_sync_note({"reasonNote": "call first"}, "delivered") == "call first"


def test_auto_sync_note_when_blank():
    assert auto_sync_note({"reasonNote": "  "}, "delivered") == (
        "Auto-synced from API status: delivered"
    )
    assert auto_sync_note({}, "pending") == "Auto-synced from API status: pending"


def test_manually_overridden():
    assert manually_overridden(_order(manualStatusOverride=True), {})
    assert manually_overridden(_order(), {"o1": {"status": "HOLD"}})
    assert not manually_overridden(_order(), {"o2": {}})
    assert not manually_overridden(_order(), [])


def test_courier_delivery_status():
    assert courier_delivery_status(
        {"success": True, "data": {"delivery_status": "delivered"}},
    ) == "delivered"
    assert courier_delivery_status({"data": {"delivery_status": "pending"}}) == "pending"
    assert courier_delivery_status({"success": False, "data": {"delivery_status": "x"}}) is None
    assert courier_delivery_status({"success": True, "data": {}}) is None
    assert courier_delivery_status(None) is None
