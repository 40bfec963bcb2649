import os

# Module-level app in kanban_api.main must not touch a database file during tests
os.environ.setdefault("STORAGE_BACKEND", "memory")

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from kanban_api.core.config import Settings
from kanban_api.core.security import TokenSettings
from kanban_api.main import create_app

API = "/api/v1"
TEST_SECRET = "test-secret"


class FakeClock:
    """Manually advanced clock for deterministic timestamps"""

    def __init__(self, start: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def token_settings():
    return TokenSettings(secret=TEST_SECRET, ttl=timedelta(hours=1))


@pytest.fixture
def test_settings():
    return Settings(STORAGE_BACKEND="memory", JWT_SECRET=TEST_SECRET, LOG_LEVEL="WARNING")


@pytest.fixture
def app(test_settings):
    return create_app(test_settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def register(client, email="alice@example.com", password="secret1"):
    return client.post(f"{API}/auth/register", json={"email": email, "password": password})


@pytest.fixture
def auth_headers(client):
    response = register(client)
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['data']['token']}"}
