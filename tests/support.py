"""Shared test fixtures: in-memory SQLite app client and user factories."""

import unittest

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from portal.core.database import get_db
from portal.core.security import ADMIN_ROLE, DEFAULT_ROLE, hash_password
from portal.main import app
from portal.models import Base, SystemSetting, User

ADMIN_EMAIL = "admin@portal.test"
ADMIN_PASSWORD = "admin-pass"


def make_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


def add_user(
    db: Session,
    *,
    name: str = "Test User",
    email: str = "user@portal.test",
    password: str = "user-pass",
    role: str = DEFAULT_ROLE,
    status: str = "active",
) -> User:
    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        role=role,
        status=status,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def set_setting(db: Session, key: str, value: str) -> None:
    row = db.get(SystemSetting, key)
    if row is None:
        db.add(SystemSetting(key=key, value=value))
    else:
        row.value = value
    db.commit()


class ApiTestCase(unittest.TestCase):
    """TestClient over a fresh in-memory database; get_db is overridden per test."""

    def setUp(self) -> None:
        self.engine = make_engine()
        self.db = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)()

        def override_get_db():
            yield self.db

        app.dependency_overrides[get_db] = override_get_db
        # No context manager: the startup lifespan (real database bootstrap) is not run.
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        self.client.close()
        self.db.close()
        Base.metadata.drop_all(bind=self.engine)
        self.engine.dispose()

    def add_admin(self, email: str = ADMIN_EMAIL, password: str = ADMIN_PASSWORD) -> User:
        return add_user(self.db, name="Admin", email=email, password=password, role=ADMIN_ROLE)

    def login(self, email: str, password: str):
        return self.client.post("/api/auth/login", json={"email": email, "password": password})

    def login_admin(self) -> User:
        admin = self.add_admin()
        response = self.login(ADMIN_EMAIL, ADMIN_PASSWORD)
        self.assertEqual(response.status_code, 200, response.text)
        return admin
