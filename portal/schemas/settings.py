"""Request/response schemas for system settings."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class SettingOut(BaseModel):
    key: str
    value: str
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class SettingValue(BaseModel):
    value: str
    updated_at: datetime | None = None


class SettingsMapResponse(BaseModel):
    """All settings keyed by name (admin only)."""

    settings: dict[str, SettingValue]


class SettingResponse(BaseModel):
    success: bool | None = None
    message: str | None = None
    setting: SettingOut


class SettingUpdateRequest(BaseModel):
    """
    Body of PUT /settings/{key}.

    value accepts any JSON value; an explicit null or empty string is a valid value,
    only an absent field is rejected.
    """

    value: Any = None


class BulkSettingsRequest(BaseModel):
    settings: Any = Field(default=None, description="Object mapping setting keys to values")


class BulkSettingsResponse(BaseModel):
    success: bool = True
    message: str
    settings: list[SettingOut]


class RestrictedAccessResponse(BaseModel):
    restricted_access: bool
