"""
Shared fixtures.

Every test gets its own SQLite file under ``tmp_path``; bcrypt runs with the
minimum cost so the suite stays fast.
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from socialfeed.application.services.auth_service import AuthService
from socialfeed.application.services.post_service import PostService
from socialfeed.core.app_factory import create_application
from socialfeed.core.config import Settings
from socialfeed.infrastructure.persistence.sqlite import SQLitePersistence
from socialfeed.services.password_hasher import PasswordHasher
from socialfeed.services.token_service import TokenService

SECRET = "test-secret-with-enough-length-for-hs256"


class FrozenClock:
    """Callable clock whose time only moves when a test moves it."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


# =============================================================================
# Services
# =============================================================================


@pytest.fixture
def clock():
    return FrozenClock(datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def persistence(tmp_path):
    """Fresh SQLite store."""
    store = SQLitePersistence(tmp_path / "feed.db")
    yield store
    store.close()


@pytest.fixture
def token_service():
    return TokenService(jwt_secret=SECRET)


@pytest.fixture
def auth_service(persistence, token_service):
    return AuthService(persistence, PasswordHasher(rounds=4), token_service)


@pytest.fixture
def post_service(persistence):
    return PostService(persistence)


@pytest.fixture
def make_user(persistence):
    """Create an account directly in the store and return it."""

    def _make(name: str):
        return persistence.create_user(
            name=name.title(),
            email=f"{name}@example.com",
            username=f"test.{name}",
            password_hash="not-a-real-hash",
        )

    return _make


# =============================================================================
# HTTP
# =============================================================================


@pytest.fixture
def settings(tmp_path, monkeypatch):
    monkeypatch.setenv("JWT_SECRET", SECRET)
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "api.db"))
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    return Settings()


@pytest.fixture
def client(settings):
    with TestClient(create_application(settings)) as test_client:
        yield test_client


@pytest.fixture
def register(client):
    """Register through the API and return ``(token, user_id)``."""

    def _register(name: str):
        response = client.post(
            "/api/auth/register",
            json={"name": name.title(), "email": f"{name}@example.com", "password": "secret123"},
        )
        assert response.status_code == 200, response.text
        token = response.json()["token"]
        me = client.get("/api/auth/me", headers={"x-auth-token": token})
        return token, me.json()["id"]

    return _register
