"""
Shared test fixtures for the Taskboard API test suite.

Every test gets its own in-memory SQLite database (aiosqlite + StaticPool)
wired into the app through the ``get_db`` dependency override.
"""

import os
import sys
from typing import AsyncGenerator, Awaitable, Callable

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CORS_ORIGINS"] = '["*"]'
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_ENABLED"] = "false"

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.v1.deps import get_db
from app.core.security import PasswordHasher, TokenService
from app.db.session import build_engine, build_session_factory, create_tables
from app.main import app

RegisterFn = Callable[..., Awaitable[tuple[str, dict]]]


@pytest.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database with all tables created."""
    engine = build_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return build_session_factory(test_engine)


@pytest.fixture(autouse=True)
def override_db(session_factory: async_sessionmaker[AsyncSession]):
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    yield
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct queries in tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def token_service() -> TokenService:
    return app.state.token_service


@pytest.fixture
def password_hasher() -> PasswordHasher:
    return app.state.password_hasher


# ── Auth helpers ────────────────────────────────────────────────────
@pytest.fixture
def register(async_client: AsyncClient) -> RegisterFn:
    """Register a user through the API and return ``(token, user_json)``."""

    async def _register(
        name: str = "Ann",
        email: str = "ann@x.com",
        password: str = "secret1",
    ) -> tuple[str, dict]:
        resp = await async_client.post(
            "/api/v1/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert resp.status_code == 201, resp.text
        data = resp.json()
        return data["token"], data["user"]

    return _register
