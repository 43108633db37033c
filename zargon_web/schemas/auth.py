"""Auth Schemas — login and first-login password forms.

Invariants:
    - Emails are stripped and lower-cased before reaching the backend
    - New passwords are at least 6 characters and must match their confirmation
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

MIN_PASSWORD_LENGTH = 6
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+$"


def normalize_email(v: Any) -> Any:
    return v.strip().lower() if isinstance(v, str) else v


class LoginForm(BaseModel):
    email: str = Field(min_length=3, pattern=EMAIL_PATTERN)
    password: str = Field(min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def clean_email(cls, v: Any) -> Any:
        return normalize_email(v)


class SetPasswordForm(BaseModel):
    """Staff first-login form; password rules checked in the order users see them."""
    email: str = Field(min_length=3, pattern=EMAIL_PATTERN)
    new_password: str = ""
    confirm_password: str = ""

    @field_validator("email", mode="before")
    @classmethod
    def clean_email(cls, v: Any) -> Any:
        return normalize_email(v)

    @model_validator(mode="after")
    def check_passwords(self):
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords do not match")
        if len(self.new_password) < MIN_PASSWORD_LENGTH:
            raise ValueError("Password must be at least 6 characters long")
        return self
