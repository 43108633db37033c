"""Notice Schemas — create/edit form for dashboard notices."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from zargon_web.core.domain_types import NoticePriority
from zargon_web.schemas.forms import blank_to_none, checkbox


class NoticeForm(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    message: str = Field(min_length=1, max_length=1000)
    priority: NoticePriority = NoticePriority.MEDIUM
    is_active: bool = True
    expires_at: str | None = None

    @field_validator("title", "message", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("is_active", mode="before")
    @classmethod
    def parse_checkbox(cls, v: Any) -> bool:
        return v if isinstance(v, bool) else checkbox(v)

    @field_validator("expires_at", mode="before")
    @classmethod
    def blank_expiry(cls, v: Any) -> Any:
        return blank_to_none(v)

    def to_payload(self) -> dict:
        payload = {
            "title": self.title,
            "message": self.message,
            "priority": self.priority.value,
            "isActive": self.is_active,
        }
        if self.expires_at:
            payload["expiresAt"] = self.expires_at
        return payload
