"""
This file contains shared fixtures and configuration for the test suite.

Pytest will automatically discover and use the fixtures defined in this file.
Every test gets a fresh in-memory SQLite database, so tests never share data.
"""

import os

# Must be in place before app.config builds the global settings
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("JWT_SECRET", "test-signing-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from collections.abc import AsyncGenerator, Generator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from app.db import Store  # noqa: E402
from app.schemas import Identity  # noqa: E402
from app.services.auth_service import AuthService  # noqa: E402

MEMORY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def store() -> AsyncGenerator[Store, None]:
    """A freshly initialized store backed by in-memory SQLite."""
    store_ = Store(MEMORY_DATABASE_URL)
    await store_.init()
    yield store_
    await store_.close()


@pytest.fixture
async def db(store: Store) -> AsyncGenerator[AsyncSession, None]:
    async with store.session() as session:
        yield session


@pytest.fixture
async def alice(db: AsyncSession) -> Identity:
    session = await AuthService(db).signup("alice", "pw1")
    return session.user


@pytest.fixture
async def bob(db: AsyncSession) -> Identity:
    session = await AuthService(db).signup("bob", "pw2")
    return session.user


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """
    Test client for the API. It talks HTTPS so the Secure session cookie is
    stored and sent back like a browser would.
    """
    from main import create_app

    app_ = create_app(database_url=MEMORY_DATABASE_URL)
    with TestClient(app_, base_url="https://testserver") as c:
        yield c
