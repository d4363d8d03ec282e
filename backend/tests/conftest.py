"""
Pytest configuration and fixtures.

The application runs against an in-memory SQLite database; get_db is
overridden so every request gets a session bound to that database.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import sprintboard.models  # noqa: F401
from sprintboard.database import Base, get_db
from sprintboard.main import app


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_maker):
    """Session for service-level tests."""
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(session_maker):
    """HTTP client talking to the app in-process."""

    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def register(client: AsyncClient, email: str, name: str = "Dev") -> dict:
    """Register a user and return auth headers plus the user payload."""
    response = await client.post(
        "/auth/register",
        json={"email": email, "password": "secret123", "name": name, "last_name": "Tester"},
    )
    assert response.status_code == 201, response.text
    body = response.json()
    return {
        "headers": {"Authorization": f"Bearer {body['access_token']}"},
        "user": body["user"],
    }


@pytest.fixture
async def alice(client):
    return await register(client, "alice@acme.io", "Alice")


@pytest.fixture
async def bob(client):
    return await register(client, "bob@acme.io", "Bob")


@pytest.fixture
def auth_headers(alice):
    return alice["headers"]


@pytest.fixture
async def project(client, auth_headers):
    """Project with code ABC owned by alice."""
    response = await client.post(
        "/projects",
        json={"code": "ABC", "name": "Alphabet"},
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()
