# File: tests/conftest.py

"""
Shared fixtures.

Each test gets its own SQLite file and its own application instance, so
tests never see each other's users or books. Environment overrides are set
before ``lms`` is imported because settings are read at import time.
"""

import os
import tempfile

os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(tempfile.gettempdir(), "lms_test_default.db")

import pytest
from fastapi.testclient import TestClient

from lms.core.config import Settings
from lms.db.init_db import init_db
from lms.db.session import build_engine, build_session_factory
from lms.main import create_application
from lms.models.user import UserRole
from lms.schemas.user import UserCreate
from lms.services import user_service

LIBRARIAN_EMAIL = "head@library.com"
MEMBER_EMAIL = "reader@library.com"
PASSWORD = "secret123"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'library_test.db'}",
        secret_key="test-secret-key",
        bcrypt_rounds=4,
    )


@pytest.fixture
def engine(settings):
    engine = build_engine(settings.database_url)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def app(settings, session_factory):
    return create_application(settings, session_factory)


@pytest.fixture
def client(app):
    return TestClient(app)


def make_user(db, email, role=UserRole.MEMBER, *, first_name="Ada", last_name="Lovelace", password=PASSWORD):
    return user_service.register_user(
        db,
        UserCreate(email=email, password=password, first_name=first_name, last_name=last_name),
        role,
    )


def login_headers(client, email, password=PASSWORD):
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture
def librarian(db):
    return make_user(db, LIBRARIAN_EMAIL, UserRole.LIBRARIAN, first_name="Head", last_name="Librarian")


@pytest.fixture
def member(db):
    return make_user(db, MEMBER_EMAIL, UserRole.MEMBER, first_name="Rita", last_name="Reader")


@pytest.fixture
def librarian_headers(client, librarian):
    return login_headers(client, LIBRARIAN_EMAIL)


@pytest.fixture
def member_headers(client, member):
    return login_headers(client, MEMBER_EMAIL)
