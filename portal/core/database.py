"""Database engine and session management."""

import logging
from collections.abc import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from portal.core.config import settings

logger = logging.getLogger(__name__)


def _build_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            echo=settings.DEBUG,
        )
    return create_engine(url, pool_pre_ping=True, echo=settings.DEBUG)


engine = _build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        logger.warning("Database connectivity check failed", exc_info=True)
        return False


def init_db(bind: Engine) -> None:
    """Create any missing tables. Existing tables are left untouched."""
    from portal.models import Base

    Base.metadata.create_all(bind=bind)
    logger.info("Database schema ensured")
