"""Password hashing and credential normalization."""

import bcrypt

from portal.core.config import settings

# Minimum password length accepted on create, update and password change.
PASSWORD_MIN_LEN = 6

# Role tags. Any other string is a valid, non-privileged role.
ADMIN_ROLE = "Administrador"
DEFAULT_ROLE = "Usuário"

STATUS_ACTIVE = "active"
STATUS_INACTIVE = "inactive"
VALID_STATUSES = (STATUS_ACTIVE, STATUS_INACTIVE)


def normalize_email(email: str) -> str:
    """Trim and lower-case an email; used for both storage and lookup."""
    return (email or "").strip().lower()


def is_strong_enough(password: str) -> bool:
    return len(password) >= PASSWORD_MIN_LEN


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors.
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(
        pw_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    ).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash (constant-time compare)."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False
