"""Login, logout and password-change flows over users, bcrypt and the session store."""

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from portal.core.errors import NotFound, Unauthenticated, ValidationFailed
from portal.core.security import (
    PASSWORD_MIN_LEN,
    STATUS_ACTIVE,
    hash_password,
    is_strong_enough,
    normalize_email,
    verify_password,
)
from portal.core.sessions import create_session, destroy_session
from portal.models.user import User
from portal.schemas.auth import SessionData, UserOut
from portal.services.accounts import sanitize

logger = logging.getLogger(__name__)

# Same body for unknown email and wrong password so callers cannot probe accounts.
INVALID_CREDENTIALS_MESSAGE = "Incorrect email or password"


def _invalid_credentials() -> Unauthenticated:
    return Unauthenticated(INVALID_CREDENTIALS_MESSAGE, error="InvalidCredentials")


def login(
    db: Session,
    email: str | None,
    password: str | None,
    *,
    previous_sid: str | None = None,
) -> tuple[SessionData, UserOut]:
    """
    Authenticate by email and password and open a new session.

    Any session already attached to the request is destroyed first so a
    login always issues a fresh session id.
    """
    if not email or not password:
        raise ValidationFailed("Email and password are required")

    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if user is None:
        logger.info("Login failed: unknown email")
        raise _invalid_credentials()
    if user.status != STATUS_ACTIVE:
        logger.info("Login refused: account disabled", extra={"user_id": user.id})
        raise Unauthenticated(
            "Your account is disabled. Contact the administrator.",
            error="AccountDisabled",
        )
    if not verify_password(password, user.password_hash):
        logger.info("Login failed: wrong password", extra={"user_id": user.id})
        raise _invalid_credentials()

    destroy_session(db, previous_sid)
    session = create_session(
        db, user_id=user.id, user_email=user.email, user_role=user.role
    )
    logger.info("Login succeeded", extra={"user_id": user.id})
    return session, sanitize(user)


def logout(db: Session, sid: str | None) -> None:
    destroy_session(db, sid)


def current_user(db: Session, session: SessionData) -> UserOut:
    """Re-read the session's user; 404 when the row was deleted after login."""
    user = db.get(User, session.user_id)
    if user is None:
        raise NotFound("Your session is invalid")
    return sanitize(user)


def change_password(
    db: Session,
    session: SessionData,
    current_password: str | None,
    new_password: str | None,
) -> None:
    """Re-verify the current password before replacing it."""
    if not current_password or not new_password:
        raise ValidationFailed("Current password and new password are required")
    if not is_strong_enough(new_password):
        raise ValidationFailed(
            f"The new password must be at least {PASSWORD_MIN_LEN} characters",
            error="WeakPassword",
        )

    user = db.get(User, session.user_id)
    if user is None:
        raise NotFound("User not found")
    if not verify_password(current_password, user.password_hash):
        raise Unauthenticated("The current password is incorrect", error="WrongPassword")

    user.password_hash = hash_password(new_password)
    user.updated_at = func.now()
    db.commit()
    logger.info("Password changed", extra={"user_id": user.id})
