"""Server-side session store: opaque ids in cookies, state in the sessions table."""

import secrets
from datetime import UTC, datetime, timedelta

from sqlalchemy.orm import Session

from portal.core.config import settings
from portal.models.session import SessionRecord
from portal.schemas.auth import SessionData

# 32 random bytes, url-safe encoded (~43 chars).
SESSION_ID_BYTES = 32


def _to_session_data(record: SessionRecord) -> SessionData | None:
    payload = record.sess or {}
    user_id = payload.get("userId")
    if user_id is None:
        return None
    return SessionData(
        sid=record.sid,
        user_id=int(user_id),
        user_email=payload.get("userEmail") or "",
        user_role=payload.get("userRole") or "",
    )


def create_session(
    db: Session,
    *,
    user_id: int,
    user_email: str,
    user_role: str,
    ttl: timedelta | None = None,
) -> SessionData:
    """Persist a new session for an authenticated user and return it."""
    if ttl is None:
        ttl = timedelta(hours=settings.SESSION_TTL_HOURS)
    record = SessionRecord(
        sid=secrets.token_urlsafe(SESSION_ID_BYTES),
        sess={"userId": user_id, "userEmail": user_email, "userRole": user_role},
        expire=datetime.now(UTC) + ttl,
    )
    db.add(record)
    db.commit()
    return SessionData(
        sid=record.sid,
        user_id=user_id,
        user_email=user_email,
        user_role=user_role,
    )


def load_session(db: Session, sid: str | None) -> SessionData | None:
    """Return the live session for sid, or None if unknown, expired or anonymous."""
    if not sid:
        return None
    record = (
        db.query(SessionRecord)
        .filter(SessionRecord.sid == sid, SessionRecord.expire > datetime.now(UTC))
        .first()
    )
    if record is None:
        return None
    return _to_session_data(record)


def destroy_session(db: Session, sid: str | None) -> None:
    """Delete the session row. Unknown ids are a no-op."""
    if not sid:
        return
    db.query(SessionRecord).filter(SessionRecord.sid == sid).delete(
        synchronize_session=False
    )
    db.commit()


def purge_expired_sessions(db: Session, now: datetime | None = None) -> int:
    """Delete every session whose expiry has passed. Returns the number removed."""
    cutoff = now or datetime.now(UTC)
    deleted = (
        db.query(SessionRecord)
        .filter(SessionRecord.expire <= cutoff)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted
