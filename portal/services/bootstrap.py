"""Startup steps: seed default settings and make sure an administrator exists."""

import logging
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portal.core.security import ADMIN_ROLE, STATUS_ACTIVE, hash_password
from portal.models.user import User
from portal.services.system_settings import seed_defaults

if TYPE_CHECKING:
    from portal.core.config import Settings

logger = logging.getLogger(__name__)


def ensure_admin_exists(db: Session, settings: "Settings") -> bool:
    """
    Create the default administrator when no user holds the admin role.

    Returns True if a user was created. Safe to run on every startup; this is
    not enforced again while the app is running.
    """
    existing = db.query(User.id).filter(User.role == ADMIN_ROLE).first()
    if existing is not None:
        return False

    admin = User(
        name=settings.ADMIN_NAME,
        email=settings.ADMIN_EMAIL,
        password_hash=hash_password(settings.ADMIN_PASSWORD.get_secret_value()),
        role=ADMIN_ROLE,
        status=STATUS_ACTIVE,
    )
    db.add(admin)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "Could not create the default administrator (%s); starting without one",
            settings.ADMIN_EMAIL,
        )
        return False
    logger.warning(
        "Default administrator created (%s); change its password after first login",
        settings.ADMIN_EMAIL,
    )
    return True


def bootstrap(db: Session, settings: "Settings") -> None:
    seed_defaults(db)
    ensure_admin_exists(db, settings)
