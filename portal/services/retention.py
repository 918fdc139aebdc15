"""Session retention: delete server-side sessions whose expiry has passed."""

import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from portal.core.sessions import purge_expired_sessions

logger = logging.getLogger(__name__)


def run_session_retention(db: Session, now: datetime | None = None) -> int:
    """
    Delete expired sessions. Returns the number deleted.

    Idempotent: safe to run repeatedly. Expired rows are already ignored on
    read, so this only reclaims space.
    """
    cutoff = now or datetime.now(UTC)
    deleted_count = purge_expired_sessions(db, cutoff)
    if deleted_count > 0:
        logger.info(
            "Session retention run: cutoff=%s, sessions_deleted=%s",
            cutoff.isoformat(),
            deleted_count,
        )
    return deleted_count
