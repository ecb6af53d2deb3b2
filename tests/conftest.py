"""
Shared fixtures.

Everything runs against the in-memory stores unless a test builds a
SQL backend itself.
"""

import pytest
from fastapi.testclient import TestClient

from tasklist.api.app import create_app
from tasklist.auth import AuthService, TokenIssuer
from tasklist.config import Settings
from tasklist.services import TaskService
from tasklist.storage import create_local_storage


TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"
PASSWORD = "secret1"


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        environment="test",
        jwt_secret_key=TEST_SECRET,
        jwt_expires_in="1h",
        database_url="memory://",
        sentry_dsn="",
    )


@pytest.fixture
def storage():
    return create_local_storage()


@pytest.fixture
def issuer(settings):
    return TokenIssuer.from_settings(settings)


@pytest.fixture
def auth_service(storage, issuer):
    return AuthService(storage.users, issuer)


@pytest.fixture
def task_service(storage):
    return TaskService(storage.tasks)


@pytest.fixture
def app(settings, storage):
    return create_app(settings=settings, storage=storage)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def register(client):
    """Register a user over HTTP. Returns (headers, user)."""

    def _register(email="a@x.com", password=PASSWORD, first_name="Jo", last_name="Do"):
        response = client.post(
            "/api/auth/register",
            json={
                "email": email,
                "password": password,
                "first_name": first_name,
                "last_name": last_name,
            },
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return {"Authorization": f"Bearer {body['token']}"}, body["user"]

    return _register
