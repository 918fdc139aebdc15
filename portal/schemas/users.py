"""Request/response schemas for admin user management."""

from pydantic import BaseModel

from portal.schemas.auth import UserOut


class UserCreateRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    password: str | None = None
    role: str | None = None


class UserUpdateRequest(BaseModel):
    """Partial update; empty or missing fields are left unchanged."""

    name: str | None = None
    email: str | None = None
    role: str | None = None
    password: str | None = None


class UserStatusRequest(BaseModel):
    status: str | None = None


class UserResponse(BaseModel):
    success: bool = True
    message: str | None = None
    user: UserOut


class UsersListResponse(BaseModel):
    """Response for GET /users (admin only)."""

    users: list[UserOut]
