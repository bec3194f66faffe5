"""
NoteShare Backend: Test Configuration (conftest.py)
====================================================

Shared pytest fixtures for the whole suite.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock standing in for AsyncSession
    ├── db_tables:       fresh SQLite schema, engine disposed afterwards
    ├── db_session:      real AsyncSession on that schema
    ├── hasher / token_service / auth_service: auth components for unit tests
    ├── test_client:     HTTPX AsyncClient wired to a fresh app
    └── login_as:        registers + logs in a user through the API
"""

import os
import tempfile

# Settings are read when noteshare is first imported, so the environment
# must be prepared before any noteshare import below.
_TEST_DIR = tempfile.mkdtemp(prefix="noteshare_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/test.db"
os.environ["JWT_SECRET"] = "test-secret-for-the-noteshare-suite-0123456789"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["APP_ENV"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

import noteshare.models  # noqa: F401
from noteshare.config import Settings
from noteshare.database import Base, async_session_factory, engine
from noteshare.services.auth_service import AuthService
from noteshare.services.password_hasher import PasswordHasher
from noteshare.services.token_service import TokenService

TEST_SECRET = os.environ["JWT_SECRET"]


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = note
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.refresh = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_tables():
    """Recreate every table, and drop pooled connections after the test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    # Pooled aiosqlite connections belong to this test's event loop.
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_tables):
    async with async_session_factory() as session:
        yield session


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_service():
    return TokenService(secret=TEST_SECRET)


@pytest.fixture
def auth_service(hasher, token_service):
    return AuthService(hasher=hasher, tokens=token_service)


@pytest_asyncio.fixture
async def test_client(db_tables):
    """
    HTTPX AsyncClient talking to a freshly built app over ASGITransport.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from noteshare.main import create_app

    app = create_app(Settings())
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def login_as(test_client):
    """
    Factory: register a user through the API, log in, and return
    (headers, user) where headers carry the bearer token.
    """

    async def _login_as(username: str, password: str = "secret1", email: str = None):
        email = email or f"{username}@example.com"
        response = await test_client.post(
            "/api/register",
            json={"username": username, "email": email, "password": password},
        )
        assert response.status_code == 200, response.text
        response = await test_client.post(
            "/api/login", json={"login": username, "password": password}
        )
        assert response.status_code == 200, response.text
        body = response.json()
        return {"Authorization": f"Bearer {body['token']}"}, body["user"]

    return _login_as
