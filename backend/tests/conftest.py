"""
Pytest fixtures for the shop backend.

Provides a throwaway SQLite database, a test client, and users/tokens for
each role.
"""

import os
import sys
import tempfile
from pathlib import Path

import pytest

# The backend uses top-level imports (database, models, routes, ...)
BACKEND_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(BACKEND_DIR))

# Configure the app before it is imported: file database shared by threads
_TMP_DIR = tempfile.mkdtemp(prefix="shop-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{Path(_TMP_DIR) / 'test.db'}"
os.environ["JWT_SECRET"] = "test-access-secret"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "15"
os.environ["LOG_LEVEL"] = "WARNING"

from fastapi.testclient import TestClient

import utils.hashing as hashing
from config import get_settings
from database import Base, SessionLocal, engine
from main import app
from models.users import User, Role
from utils.tokenJWT import TokenService

# Low bcrypt cost keeps the suite fast
hashing.BCRYPT_ROUNDS = 4

DEFAULT_PASSWORD = "Secret123!"


@pytest.fixture(scope="function")
def db_session():
    """Fresh tables for each test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def client(db_session):
    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="function")
def token_service():
    return TokenService.from_settings(get_settings())


@pytest.fixture(scope="function")
def make_user(db_session):
    """Factory creating a user row directly in the store."""
    counter = {"n": 0}

    def _make(role=Role.CASHIER, password=DEFAULT_PASSWORD, disabled=False, **fields):
        counter["n"] += 1
        n = counter["n"]
        user = User(
            fullname=fields.get("fullname", f"User {n}"),
            username=fields.get("username", f"user{n}"),
            email=fields.get("email", f"user{n}@shop.test"),
            password=hashing.get_password_hash(password),
            role=role.value if isinstance(role, Role) else role,
            is_disabled=disabled,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


def auth_headers(token_service, user) -> dict:
    token = token_service.issue_access_token(user.id, user.email, user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def admin_user(make_user):
    return make_user(Role.ADMIN, username="admin", email="admin@shop.test")


@pytest.fixture(scope="function")
def cashier_user(make_user):
    return make_user(Role.CASHIER, username="cashier", email="cashier@shop.test")


@pytest.fixture(scope="function")
def admin_headers(token_service, admin_user):
    return auth_headers(token_service, admin_user)


@pytest.fixture(scope="function")
def cashier_headers(token_service, cashier_user):
    return auth_headers(token_service, cashier_user)
