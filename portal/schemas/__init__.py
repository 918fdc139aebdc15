"""Pydantic request/response schemas."""

from portal.schemas.auth import (
    ChangePasswordRequest,
    CheckResponse,
    LoginRequest,
    LoginResponse,
    MeResponse,
    MessageResponse,
    SessionData,
    UserOut,
)
from portal.schemas.health import HealthResponse
from portal.schemas.settings import (
    BulkSettingsRequest,
    BulkSettingsResponse,
    RestrictedAccessResponse,
    SettingOut,
    SettingResponse,
    SettingsMapResponse,
    SettingUpdateRequest,
    SettingValue,
)
from portal.schemas.users import (
    UserCreateRequest,
    UserResponse,
    UsersListResponse,
    UserStatusRequest,
    UserUpdateRequest,
)
from portal.schemas.webhook import WebhookAck

__all__ = [
    "BulkSettingsRequest",
    "BulkSettingsResponse",
    "ChangePasswordRequest",
    "CheckResponse",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "MeResponse",
    "MessageResponse",
    "RestrictedAccessResponse",
    "SessionData",
    "SettingOut",
    "SettingResponse",
    "SettingUpdateRequest",
    "SettingValue",
    "SettingsMapResponse",
    "UserCreateRequest",
    "UserOut",
    "UserResponse",
    "UserStatusRequest",
    "UserUpdateRequest",
    "UsersListResponse",
    "WebhookAck",
]
