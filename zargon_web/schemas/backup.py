"""Backup & Database Schemas — admin action forms on the backup page."""

from pydantic import BaseModel, Field

from zargon_web.core.domain_types import BackupType, DatabaseTarget


class BackupForm(BaseModel):
    type: BackupType = BackupType.FULL


class RestoreForm(BaseModel):
    file_name: str = Field(min_length=1)


class SwitchDatabaseForm(BaseModel):
    target: DatabaseTarget
