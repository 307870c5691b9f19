"""
Pytest configuration and fixtures.
"""

import itertools
import os

# Point the app at a throwaway in-memory database before it is imported
os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['JWT_SECRET'] = 'test-secret'
os.environ.setdefault('LOG_LEVEL', 'WARNING')

import pytest
from fastapi.testclient import TestClient

from relief_api import models
from relief_api.auth import utils_auth as auth_utils
from relief_api.database import Base, SessionLocal, engine
from relief_api.main import app
from relief_api.models import RoleName
from relief_api.seed import seed_roles

PASSWORD = 'password123'

_emails = itertools.count(1)


@pytest.fixture(autouse=True)
def clean_database():
    """Fresh schema with the default roles for every test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        seed_roles(session)
    finally:
        session.close()
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture(scope="session")
def password_hash():
    """bcrypt is slow; hash the shared test password once."""
    return auth_utils.hash_password(PASSWORD)


@pytest.fixture
def make_user(db, password_hash):
    def _make(role=RoleName.CITIZEN, name=None):
        n = next(_emails)
        role_row = db.query(models.Role).filter(models.Role.role_name == role.value).one()
        user = models.User(
            name=name or f"{role.value} {n}",
            email=f"user{n}@relief.org",
            password_hash=password_hash,
        )
        user.roles.append(role_row)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


def auth_headers(user):
    token = auth_utils.create_access_token(user.user_id, user.email)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def citizen(make_user):
    return make_user(RoleName.CITIZEN, name="Ana Citizen")


@pytest.fixture
def worker(make_user):
    return make_user(RoleName.RESCUE_WORKER, name="Raj Worker")


@pytest.fixture
def ngo(make_user):
    return make_user(RoleName.NGO, name="Helping Hands")


@pytest.fixture
def government(make_user):
    return make_user(RoleName.GOVERNMENT, name="Gov Officer")
