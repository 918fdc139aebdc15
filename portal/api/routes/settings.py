"""System settings endpoints: admin read/write plus public reads."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from portal.api.gate import require_admin
from portal.core.database import get_db
from portal.core.errors import ValidationFailed
from portal.schemas.auth import SessionData
from portal.schemas.settings import (
    BulkSettingsRequest,
    BulkSettingsResponse,
    RestrictedAccessResponse,
    SettingResponse,
    SettingsMapResponse,
    SettingUpdateRequest,
)
from portal.services import system_settings

router = APIRouter()

AdminSession = Annotated[SessionData, Depends(require_admin)]
Db = Annotated[Session, Depends(get_db)]


@router.get("", response_model=SettingsMapResponse)
def get_all_settings(_admin: AdminSession, db: Db) -> SettingsMapResponse:
    return SettingsMapResponse(settings=system_settings.get_all_settings(db))


@router.put("", response_model=BulkSettingsResponse)
def bulk_update_settings(
    body: BulkSettingsRequest, _admin: AdminSession, db: Db
) -> BulkSettingsResponse:
    """Upsert every key of body.settings independently (no shared transaction)."""
    rows = system_settings.bulk_upsert_settings(db, body.settings)
    return BulkSettingsResponse(message="Settings updated successfully", settings=rows)


@router.get("/public/restricted-access", response_model=RestrictedAccessResponse)
def get_restricted_access(db: Db) -> RestrictedAccessResponse:
    """Public probe used by the frontend before rendering gated pages."""
    return RestrictedAccessResponse(restricted_access=system_settings.is_restricted_access(db))


@router.get("/{key}", response_model=SettingResponse, response_model_exclude_none=True)
def get_setting(key: str, db: Db) -> SettingResponse:
    return SettingResponse(setting=system_settings.get_setting(db, key))


@router.put("/{key}", response_model=SettingResponse)
def update_setting(
    key: str, body: SettingUpdateRequest, _admin: AdminSession, db: Db
) -> SettingResponse:
    if "value" not in body.model_fields_set:
        raise ValidationFailed("A value is required")
    row = system_settings.upsert_setting(db, key, body.value)
    return SettingResponse(success=True, message="Setting updated successfully", setting=row)
