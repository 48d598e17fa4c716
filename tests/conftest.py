"""
Test configuration and fixtures for GigWallet

Every test gets a fresh in-memory SQLite database. Services open and commit
their own transactions, so tests use a session factory and a new session
per step rather than one long-lived session.

Usage:
    pytest tests/
"""

import os

# Settings are read at import time
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["WEBHOOK_SECRET"] = "test-webhook-secret"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport
from fastapi import FastAPI

from gigwallet.db.base import Base
from gigwallet.db.session import get_db
from gigwallet.main import app
from gigwallet.models.user import User
import gigwallet.models  # noqa: F401

from tests.fixtures.database import create_test_user_with_wallet


@pytest.fixture
async def db_engine():
    """
    Create an in-memory database with all tables.

    StaticPool keeps one connection so every session sees the same database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker:
    """Session factory bound to the test engine."""
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def async_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """A session for setup and assertions."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def test_app(session_factory) -> AsyncGenerator[FastAPI, None]:
    """
    The FastAPI app with its database dependency pointed at the test engine.
    """
    async def get_test_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = get_test_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def test_client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that talks to the app in-process."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# Test data fixtures
@pytest.fixture
async def poster(session_factory) -> User:
    """A job poster with an empty wallet."""
    async with session_factory() as session:
        return await create_test_user_with_wallet(session, "poster@example.com", "Pat Poster")


@pytest.fixture
async def worker(session_factory) -> User:
    """A gig worker with an empty wallet."""
    async with session_factory() as session:
        return await create_test_user_with_wallet(session, "worker@example.com", "Wes Worker")


@pytest.fixture
async def admin(session_factory) -> User:
    """An admin user."""
    async with session_factory() as session:
        return await create_test_user_with_wallet(
            session, "admin@example.com", "Ada Admin", is_admin=True
        )


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
