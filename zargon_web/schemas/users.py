"""User Schemas — profile update, staff creation and staff password forms.

Invariants:
    - Changing a password needs the current password and a matching confirmation
    - Profile payload omits password keys unless a new password was entered
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from zargon_web.schemas.auth import EMAIL_PATTERN, MIN_PASSWORD_LENGTH
from zargon_web.schemas.forms import blank_to_none


class ProfileForm(BaseModel):
    name: str = Field(min_length=2, max_length=50)
    email: str = Field(pattern=EMAIL_PATTERN)
    current_password: str = ""
    new_password: str = ""
    confirm_password: str = ""

    @field_validator("name", "email", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @model_validator(mode="after")
    def check_password_change(self):
        if not self.new_password:
            return self
        if self.new_password != self.confirm_password:
            raise ValueError("New passwords do not match")
        if len(self.new_password) < MIN_PASSWORD_LENGTH:
            raise ValueError("New password must be at least 6 characters long")
        if not self.current_password:
            raise ValueError("Current password is required to change password")
        return self

    def to_payload(self) -> dict:
        payload = {"name": self.name, "email": self.email}
        if self.new_password:
            payload["currentPassword"] = self.current_password
            payload["newPassword"] = self.new_password
        return payload


class StaffForm(BaseModel):
    """Admin creates a staff account; without a password the staff sets one at first login."""
    name: str = Field(min_length=2, max_length=50)
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str | None = Field(None, min_length=MIN_PASSWORD_LENGTH)

    @field_validator("name", "email", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("password", mode="before")
    @classmethod
    def blank_password(cls, v: Any) -> Any:
        return blank_to_none(v)

    def to_payload(self) -> dict:
        payload = {"name": self.name, "email": self.email.lower()}
        if self.password:
            payload["password"] = self.password
        return payload


class StaffPasswordForm(BaseModel):
    new_password: str = Field(min_length=MIN_PASSWORD_LENGTH)


class ActivityFilter(BaseModel):
    staff_id: str | None = None
    action: str | None = None
    start_date: str | None = None
    end_date: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def blanks(cls, v: Any) -> Any:
        return blank_to_none(v)

    def to_query(self) -> dict[str, str]:
        query = {
            "staffId": self.staff_id,
            "action": self.action,
            "startDate": self.start_date,
            "endDate": self.end_date,
        }
        return {k: v for k, v in query.items() if v}
