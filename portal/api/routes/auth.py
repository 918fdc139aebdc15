"""Session login endpoints: login, logout, check, current user, password change."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from portal.api.gate import get_session, require_auth
from portal.core.config import settings
from portal.core.database import get_db
from portal.schemas.auth import (
    ChangePasswordRequest,
    CheckResponse,
    LoginRequest,
    LoginResponse,
    MeResponse,
    MessageResponse,
    SessionData,
)
from portal.services import auth as auth_service

router = APIRouter()


def _set_session_cookie(response: Response, sid: str) -> None:
    """Session cookie (httpOnly). Only the opaque id leaves the server."""
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=sid,
        httponly=True,
        samesite=settings.SESSION_COOKIE_SAMESITE,
        # Browsers require Secure when SameSite=None
        secure=settings.SESSION_COOKIE_SECURE or settings.SESSION_COOKIE_SAMESITE == "none",
        max_age=settings.SESSION_TTL_HOURS * 3600,
        path="/",
    )


def _clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME, path="/")


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> LoginResponse:
    """
    Authenticate with email and password and start a server-side session.
    The session id is returned in an httpOnly cookie.
    """
    session, user = auth_service.login(
        db,
        body.email,
        body.password,
        previous_sid=request.cookies.get(settings.SESSION_COOKIE_NAME),
    )
    _set_session_cookie(response, session.sid)
    return LoginResponse(message="Login successful", user=user)


@router.post("/logout", response_model=MessageResponse)
def logout(
    request: Request,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    auth_service.logout(db, request.cookies.get(settings.SESSION_COOKIE_NAME))
    _clear_session_cookie(response)
    return MessageResponse(message="Logout successful")


@router.get("/me", response_model=MeResponse)
def me(
    session: Annotated[SessionData, Depends(require_auth)],
    db: Annotated[Session, Depends(get_db)],
) -> MeResponse:
    """Current user, re-read from the database (404 if deleted since login)."""
    return MeResponse(user=auth_service.current_user(db, session))


@router.get("/check", response_model=CheckResponse, response_model_exclude_none=True)
def check(
    session: Annotated[SessionData | None, Depends(get_session)],
) -> CheckResponse:
    """Session presence probe; never reads the users table."""
    if session is None:
        return CheckResponse(authenticated=False)
    return CheckResponse(
        authenticated=True,
        user_id=session.user_id,
        user_role=session.user_role,
    )


@router.put("/password", response_model=MessageResponse)
def change_password(
    body: ChangePasswordRequest,
    session: Annotated[SessionData, Depends(require_auth)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    auth_service.change_password(db, session, body.current_password, body.new_password)
    return MessageResponse(message="Password changed successfully")
