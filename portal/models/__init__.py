"""SQLAlchemy ORM models."""

from portal.models.base import Base
from portal.models.session import SessionRecord
from portal.models.setting import RESTRICTED_ACCESS_KEY, SystemSetting
from portal.models.user import User

__all__ = ["Base", "RESTRICTED_ACCESS_KEY", "SessionRecord", "SystemSetting", "User"]
