"""Admin user management: CRUD over users with uniqueness and self-protection rules."""

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from portal.core.errors import (
    Conflict,
    NotFound,
    SelfProtectionViolation,
    ValidationFailed,
)
from portal.core.security import (
    DEFAULT_ROLE,
    PASSWORD_MIN_LEN,
    STATUS_ACTIVE,
    STATUS_INACTIVE,
    VALID_STATUSES,
    hash_password,
    is_strong_enough,
    normalize_email,
)
from portal.models.user import User
from portal.schemas.auth import UserOut

logger = logging.getLogger(__name__)


def sanitize(user: User) -> UserOut:
    """Project a user row to its password-free representation."""
    return UserOut.model_validate(user)


def _weak_password() -> ValidationFailed:
    return ValidationFailed(
        f"Password must be at least {PASSWORD_MIN_LEN} characters",
        error="WeakPassword",
    )


def _email_taken(db: Session, email: str, exclude_id: int | None = None) -> bool:
    query = db.query(User.id).filter(User.email == email)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


def _get_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def _commit_or_conflict(db: Session) -> None:
    """Commit; a unique-index violation on email surfaces as 409."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise Conflict("A user with this email already exists") from e


def list_users(db: Session) -> list[UserOut]:
    users = db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
    return [sanitize(u) for u in users]


def get_user(db: Session, user_id: int) -> UserOut:
    return sanitize(_get_or_404(db, user_id))


def create_user(
    db: Session,
    *,
    name: str | None,
    email: str | None,
    password: str | None,
    role: str | None = None,
) -> UserOut:
    """
    Create an active user with a bcrypt-hashed password.

    The email pre-check gives a friendly 409; the unique index on users.email
    is what actually guarantees uniqueness under concurrent requests.
    """
    normalized = normalize_email(email)
    if not name or not name.strip() or not normalized or not password:
        raise ValidationFailed("Name, email and password are required")
    if not is_strong_enough(password):
        raise _weak_password()

    if _email_taken(db, normalized):
        raise Conflict("A user with this email already exists")

    user = User(
        name=name.strip(),
        email=normalized,
        password_hash=hash_password(password),
        role=role or DEFAULT_ROLE,
        status=STATUS_ACTIVE,
    )
    db.add(user)
    _commit_or_conflict(db)
    db.refresh(user)
    logger.info("User created", extra={"user_id": user.id, "role": user.role})
    return sanitize(user)


def update_user(
    db: Session,
    user_id: int,
    *,
    name: str | None = None,
    email: str | None = None,
    role: str | None = None,
    password: str | None = None,
) -> UserOut:
    """Write only the provided fields, always refreshing updated_at."""
    user = _get_or_404(db, user_id)

    # An empty string means "not provided"; blank text is a bad value.
    normalized = normalize_email(email)
    if email and not normalized:
        raise ValidationFailed("Email cannot be blank")
    if name and not name.strip():
        raise ValidationFailed("Name cannot be blank")
    if normalized and _email_taken(db, normalized, exclude_id=user_id):
        raise Conflict("Another user already has this email")
    if password and not is_strong_enough(password):
        raise _weak_password()

    if name:
        user.name = name.strip()
    if normalized:
        user.email = normalized
    if role:
        user.role = role
    if password:
        user.password_hash = hash_password(password)
    user.updated_at = func.now()

    _commit_or_conflict(db)
    db.refresh(user)
    logger.info("User updated", extra={"user_id": user.id})
    return sanitize(user)


def delete_user(db: Session, user_id: int, *, acting_user_id: int) -> None:
    if user_id == acting_user_id:
        raise SelfProtectionViolation(
            "You cannot delete your own account", error="SelfDeletion"
        )
    user = _get_or_404(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("User deleted", extra={"user_id": user_id, "acting_user_id": acting_user_id})


def set_user_status(
    db: Session, user_id: int, status: str | None, *, acting_user_id: int
) -> UserOut:
    if status not in VALID_STATUSES:
        raise ValidationFailed(
            'Status must be "active" or "inactive"', error="InvalidStatus"
        )
    if user_id == acting_user_id and status == STATUS_INACTIVE:
        raise SelfProtectionViolation(
            "You cannot deactivate your own account", error="SelfDeactivation"
        )
    user = _get_or_404(db, user_id)
    user.status = status
    user.updated_at = func.now()
    db.commit()
    db.refresh(user)
    logger.info(
        "User status changed",
        extra={"user_id": user_id, "status": status, "acting_user_id": acting_user_id},
    )
    return sanitize(user)
