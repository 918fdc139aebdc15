"""ORM model for server-side login sessions."""

from sqlalchemy import JSON, Column, DateTime, String

from portal.models.base import Base


class SessionRecord(Base):
    """
    Session state keyed by the opaque id carried in the session cookie.

    sess holds userId, userEmail and userRole; rows past expire are treated as absent.
    """

    __tablename__ = "sessions"

    sid = Column(String(128), primary_key=True)
    sess = Column(JSON, nullable=False)
    expire = Column(DateTime(timezone=True), nullable=False, index=True)
