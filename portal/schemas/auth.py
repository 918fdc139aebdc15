"""Request/response schemas for session and account endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field


class SessionData(BaseModel):
    """Payload of the current request's server-side session."""

    sid: str
    user_id: int
    user_email: str
    user_role: str


class UserOut(BaseModel):
    """Sanitized user: every column except the password hash."""

    id: int
    name: str
    email: str
    role: str
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class LoginRequest(BaseModel):
    """Credentials for login. Presence is checked by the service so it can answer 400."""

    email: str | None = Field(default=None, description="Account email (any casing)")
    password: str | None = Field(default=None, description="Plain-text password")


class LoginResponse(BaseModel):
    success: bool = True
    message: str
    user: UserOut


class MessageResponse(BaseModel):
    """Generic acknowledgement body."""

    success: bool = True
    message: str


class CheckResponse(BaseModel):
    """Session presence probe; ids are omitted when not authenticated."""

    authenticated: bool
    user_id: int | None = Field(default=None, alias="userId")
    user_role: str | None = Field(default=None, alias="userRole")

    class Config:
        populate_by_name = True


class MeResponse(BaseModel):
    user: UserOut


class ChangePasswordRequest(BaseModel):
    current_password: str | None = Field(default=None, alias="currentPassword")
    new_password: str | None = Field(default=None, alias="newPassword")

    class Config:
        populate_by_name = True
