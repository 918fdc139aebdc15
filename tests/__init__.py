"""Test package. Configures the app for an in-memory database before it is imported."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DB_AUTO_CREATE", "false")
