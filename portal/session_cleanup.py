"""
CLI entrypoint for the expired-session cleanup job. Run from cron, e.g.:

  python -m portal.session_cleanup

Or hourly: 0 * * * * cd /path/to/portal && .venv/bin/python -m portal.session_cleanup
"""

import logging
import sys

from portal.core.database import SessionLocal
from portal.services.retention import run_session_retention

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Delete sessions whose expiry has passed."""
    db = SessionLocal()
    try:
        deleted = run_session_retention(db)
        logger.info("Session cleanup completed: sessions_deleted=%s", deleted)
        return 0
    except Exception as e:
        logger.exception("Session cleanup failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
