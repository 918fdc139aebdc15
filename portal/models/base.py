"""SQLAlchemy declarative Base shared by the users, settings and sessions tables."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base; Base.metadata is what init_db and Alembic create from."""
