"""Configuration, database access, password hashing and the session store."""

from portal.core.config import get_settings, settings
from portal.core.database import SessionLocal, get_db

__all__ = ["SessionLocal", "get_db", "get_settings", "settings"]
