"""Admin user management endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from portal.api.gate import require_admin
from portal.core.database import get_db
from portal.schemas.auth import MessageResponse, SessionData
from portal.schemas.users import (
    UserCreateRequest,
    UserResponse,
    UsersListResponse,
    UserStatusRequest,
    UserUpdateRequest,
)
from portal.services import accounts

router = APIRouter()

AdminSession = Annotated[SessionData, Depends(require_admin)]
Db = Annotated[Session, Depends(get_db)]


@router.get("", response_model=UsersListResponse)
def list_users(_admin: AdminSession, db: Db) -> UsersListResponse:
    """All users, newest first, without password hashes."""
    return UsersListResponse(users=accounts.list_users(db))


@router.get("/{user_id}", response_model=UserResponse, response_model_exclude_none=True)
def get_user(user_id: int, _admin: AdminSession, db: Db) -> UserResponse:
    return UserResponse(user=accounts.get_user(db, user_id))


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(body: UserCreateRequest, _admin: AdminSession, db: Db) -> UserResponse:
    user = accounts.create_user(
        db,
        name=body.name,
        email=body.email,
        password=body.password,
        role=body.role,
    )
    return UserResponse(message="User created successfully", user=user)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int, body: UserUpdateRequest, _admin: AdminSession, db: Db
) -> UserResponse:
    user = accounts.update_user(
        db,
        user_id,
        name=body.name,
        email=body.email,
        role=body.role,
        password=body.password,
    )
    return UserResponse(message="User updated successfully", user=user)


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(user_id: int, admin: AdminSession, db: Db) -> MessageResponse:
    accounts.delete_user(db, user_id, acting_user_id=admin.user_id)
    return MessageResponse(message="User deleted successfully")


@router.patch("/{user_id}/status", response_model=UserResponse)
def set_user_status(
    user_id: int, body: UserStatusRequest, admin: AdminSession, db: Db
) -> UserResponse:
    user = accounts.set_user_status(db, user_id, body.status, acting_user_id=admin.user_id)
    verb = "activated" if user.status == "active" else "deactivated"
    return UserResponse(message=f"User {verb} successfully", user=user)
