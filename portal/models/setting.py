"""ORM model for system-wide key/value settings."""

from sqlalchemy import Column, DateTime, String, Text, func

from portal.models.base import Base

RESTRICTED_ACCESS_KEY = "restricted_access"


class SystemSetting(Base):
    """One setting; value is always stored as text and coerced by callers."""

    __tablename__ = "system_settings"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
