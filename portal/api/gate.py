"""
Request gates composed in front of protected routes.

require_auth and require_admin reject the request; check_restricted_access
redirects anonymous visitors while restricted mode is on; load_user only
hydrates request.state.user. The last two take a StoreErrorPolicy that
decides what a database failure means for the request.
"""

import enum
import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portal.core.config import settings
from portal.core.database import get_db
from portal.core.errors import Forbidden, LoginRedirect, Unauthenticated
from portal.core.security import ADMIN_ROLE
from portal.core.sessions import load_session
from portal.models.user import User
from portal.schemas.auth import SessionData, UserOut
from portal.services.system_settings import is_restricted_access

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"


class StoreErrorPolicy(enum.Enum):
    """What a gate does when its database read fails."""

    FAIL_OPEN = "fail_open"
    FAIL_CLOSED = "fail_closed"


def get_session(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> SessionData | None:
    """Dependency: the live session named by the session cookie, or None."""
    return load_session(db, request.cookies.get(settings.SESSION_COOKIE_NAME))


def require_auth(
    session: Annotated[SessionData | None, Depends(get_session)],
) -> SessionData:
    """Dependency: require a session carrying a user id. Raises 401 otherwise."""
    if session is None:
        raise Unauthenticated("Log in to access this resource")
    return session


def require_admin(
    session: Annotated[SessionData | None, Depends(get_session)],
    db: Annotated[Session, Depends(get_db)],
) -> SessionData:
    """
    Dependency: require a session whose user currently holds the admin role.

    The role is read from the users table on every call, never from the
    session payload, so a demotion applies to the very next request.
    """
    if session is None:
        raise Unauthenticated("Log in to access this resource")
    role = db.query(User.role).filter(User.id == session.user_id).scalar()
    if role is None:
        raise Unauthenticated("Your session is invalid", error="InvalidSession")
    if role != ADMIN_ROLE:
        raise Forbidden("You do not have permission to access this resource")
    return session


def enforce_restricted_access(
    db: Session,
    session: SessionData | None,
    on_store_error: StoreErrorPolicy = StoreErrorPolicy.FAIL_OPEN,
) -> None:
    """Raise LoginRedirect for anonymous visitors while restricted mode is on."""
    try:
        restricted = is_restricted_access(db)
    except SQLAlchemyError:
        if on_store_error is StoreErrorPolicy.FAIL_CLOSED:
            raise
        logger.exception("Restricted-access check failed; allowing request")
        db.rollback()
        return
    if restricted and session is None:
        raise LoginRedirect(LOGIN_PATH)


def check_restricted_access(
    on_store_error: StoreErrorPolicy = StoreErrorPolicy.FAIL_OPEN,
) -> Callable[..., None]:
    """Build a dependency that redirects anonymous visitors to /login in restricted mode."""

    def dependency(
        session: Annotated[SessionData | None, Depends(get_session)],
        db: Annotated[Session, Depends(get_db)],
    ) -> None:
        enforce_restricted_access(db, session, on_store_error)

    return dependency


def load_user(
    on_store_error: StoreErrorPolicy = StoreErrorPolicy.FAIL_OPEN,
) -> Callable[..., UserOut | None]:
    """Build a dependency that attaches the sanitized session user to request.state.user."""

    def dependency(
        request: Request,
        session: Annotated[SessionData | None, Depends(get_session)],
        db: Annotated[Session, Depends(get_db)],
    ) -> UserOut | None:
        request.state.user = None
        if session is None:
            return None
        try:
            user = db.get(User, session.user_id)
        except SQLAlchemyError:
            if on_store_error is StoreErrorPolicy.FAIL_CLOSED:
                raise
            logger.exception("Failed to load session user", extra={"user_id": session.user_id})
            db.rollback()
            return None
        if user is not None:
            request.state.user = UserOut(
                id=user.id,
                name=user.name,
                email=user.email,
                role=user.role,
                status=user.status,
            )
        return request.state.user

    return dependency
