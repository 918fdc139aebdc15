"""ORM model for portal accounts (login and role-gated administration)."""

from sqlalchemy import Column, DateTime, Integer, String, func

from portal.models.base import Base


class User(Base):
    """
    Portal account authenticated through server-side sessions.

    email is stored trimmed and lower-cased; role 'Administrador' grants admin access;
    status is 'active' or 'inactive'.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(50), nullable=False, default="Usuário", server_default="Usuário")
    status = Column(String(20), nullable=False, default="active", server_default="active")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
