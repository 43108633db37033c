"""Form schema tests — validation helper, auth, inventory, notice and user forms.

Tests cover:
    - validate_form reports the first error without pydantic's prefix
    - Password rules in the order users see them
    - Inventory payload nesting and filter query
    - Notice checkbox and expiry handling
    - Profile/staff payloads omit passwords unless given
"""

import pytest

from zargon_web.core.errors import FormValidationError
from zargon_web.schemas.auth import LoginForm, SetPasswordForm
from zargon_web.schemas.forms import blank_to_none, checkbox, validate_form
from zargon_web.schemas.inventory import InventoryForm, inventory_query
from zargon_web.schemas.notices import NoticeForm
from zargon_web.schemas.users import ActivityFilter, ProfileForm, StaffForm


# -- Helpers -------------------------------------------------------------------

def test_checkbox_values():
    assert checkbox("on") and checkbox("true") and checkbox("1")
    assert not checkbox(None) and not checkbox("") and not checkbox("off")


def test_blank_to_none():
    assert blank_to_none("  ") is None
    assert blank_to_none("x") == "x"
    assert blank_to_none(0) == 0


# -- Auth ----------------------------------------------------------------------

def test_login_email_normalized():
    form = validate_form(LoginForm, {"email": "  Admin@Zargon.TEST ", "password": "x"})
    assert form.email == "admin@zargon.test"


def test_login_requires_password():
    with pytest.raises(FormValidationError) as exc:
        validate_form(LoginForm, {"email": "a@b.c", "password": ""})
    assert exc.value.field == "password"


def test_set_password_mismatch_reported_first():
    with pytest.raises(FormValidationError) as exc:
        validate_form(SetPasswordForm, {
            "email": "a@b.c", "new_password": "abc", "confirm_password": "abd",
        })
    assert exc.value.message == "Passwords do not match"


def test_set_password_too_short():
    with pytest.raises(FormValidationError) as exc:
        validate_form(SetPasswordForm, {
            "email": "a@b.c", "new_password": "abc", "confirm_password": "abc",
        })
    assert exc.value.message == "Password must be at least 6 characters long"


# -- Inventory -----------------------------------------------------------------

def test_inventory_payload():
    form = validate_form(InventoryForm, {
        "pid": "7", "color": " Black ", "final_code": "BLK-7",
        "size_m": "2", "size_l": "", "size_xl": "5", "size_xxl": "0",
        "buy_price": "350", "description": "", "is_active": "on",
    })
    assert form.to_payload() == {
        "pid": 7, "color": "Black", "finalCode": "BLK-7",
        "sizes": {"M": 2, "L": 0, "XL": 5, "XXL": 0},
        "buyPrice": 350.0, "isActive": True,
    }


def test_inventory_unchecked_active_is_false():
    form = validate_form(InventoryForm, {"color": "Red", "final_code": "R1"})
    assert form.is_active is True
    form = validate_form(InventoryForm, {"color": "Red", "final_code": "R1", "is_active": ""})
    assert form.is_active is False


def test_inventory_negative_quantity_rejected():
    with pytest.raises(FormValidationError) as exc:
        validate_form(InventoryForm, {"color": "Red", "final_code": "R1", "size_m": "-1"})
    assert exc.value.field == "size_m"


def test_inventory_query():
    query = inventory_query(
        {"finalCode": "BLK", "color": "", "inStockOnly": "true", "sizeFilter": "all"},
        3, 20,
    )
    assert query == {
        "finalCode": "BLK", "inStockOnly": "true", "page": "3", "pageSize": "20",
    }


# -- Notices -------------------------------------------------------------------

def test_notice_payload_without_expiry():
    form = validate_form(NoticeForm, {
        "title": " Eid ", "message": "Closed Friday", "priority": "urgent",
        "is_active": "on", "expires_at": "",
    })
    assert form.to_payload() == {
        "title": "Eid", "message": "Closed Friday",
        "priority": "urgent", "isActive": True,
    }


def test_notice_title_required():
    with pytest.raises(FormValidationError) as exc:
        validate_form(NoticeForm, {"title": "  ", "message": "m"})
    assert exc.value.field == "title"


def test_notice_unknown_priority_rejected():
    with pytest.raises(FormValidationError):
        validate_form(NoticeForm, {"title": "t", "message": "m", "priority": "critical"})


# -- Users ---------------------------------------------------------------------

def test_profile_without_new_password_omits_password_keys():
    form = validate_form(ProfileForm, {"name": "Ayesha", "email": "a@b.c"})
    assert form.to_payload() == {"name": "Ayesha", "email": "a@b.c"}


def test_profile_password_change_needs_current_password():
    with pytest.raises(FormValidationError) as exc:
        validate_form(ProfileForm, {
            "name": "Ayesha", "email": "a@b.c",
            "new_password": "secret1", "confirm_password": "secret1",
        })
    assert exc.value.message == "Current password is required to change password"


def test_profile_password_change_payload():
    form = validate_form(ProfileForm, {
        "name": "Ayesha", "email": "a@b.c", "current_password": "old",
        "new_password": "secret1", "confirm_password": "secret1",
    })
    assert form.to_payload()["newPassword"] == "secret1"
    assert form.to_payload()["currentPassword"] == "old"


def test_staff_without_password():
    form = validate_form(StaffForm, {"name": "Rafi", "email": "Rafi@Z.test", "password": ""})
    assert form.to_payload() == {"name": "Rafi", "email": "rafi@z.test"}


def test_staff_short_password_rejected():
    with pytest.raises(FormValidationError):
        validate_form(StaffForm, {"name": "Rafi", "email": "r@z.t", "password": "123"})


def test_activity_filter_query():
    query = ActivityFilter.model_validate({
        "staff_id": "", "action": "login", "start_date": "2025-01-01", "end_date": " ",
    }).to_query()
    assert query == {"action": "login", "startDate": "2025-01-01"}
