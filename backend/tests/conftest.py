"""
Pytest fixtures for test database, client, and authentication.

Tables are created and dropped around every test. The default database is a
throwaway SQLite file; point TEST_DATABASE_URL at PostgreSQL to exercise row
locking for real.
"""

import os
from datetime import datetime, timezone, timedelta
from typing import AsyncGenerator

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from booking_api.main import app
from booking_api.db.base import Base
from booking_api.db.session import get_db
from booking_api.core.security import create_access_token, hash_password
from booking_api.models import User, Event

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///./test_event_booking.db")

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

TEST_PASSWORD = "testpassword123"


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield session, then drop tables for isolation."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _persist(db_session: AsyncSession, obj):
    # Detach so a rollback inside a request cannot expire the fixture's attributes
    db_session.add(obj)
    await db_session.commit()
    await db_session.refresh(obj)
    db_session.expunge(obj)
    return obj


def _headers_for(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.email)}"}


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    return await _persist(db_session, User(
        name="Test User",
        email="test@example.com",
        hashed_password=hash_password(TEST_PASSWORD),
    ))


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    return await _persist(db_session, User(
        name="Other User",
        email="other@example.com",
        hashed_password=hash_password(TEST_PASSWORD),
    ))


@pytest_asyncio.fixture
async def auth_headers(test_user: User) -> dict:
    """Authorization headers with Bearer token."""
    return _headers_for(test_user)


@pytest_asyncio.fixture
async def other_headers(other_user: User) -> dict:
    return _headers_for(other_user)


@pytest_asyncio.fixture
async def test_event(db_session: AsyncSession, test_user: User) -> Event:
    """An upcoming event owned by test_user with 100 seats."""
    return await _persist(db_session, Event(
        title="Test Concert",
        description="A test event",
        date=datetime.now(timezone.utc) + timedelta(days=30),
        location="Main Hall",
        available_seats=100,
        user_id=test_user.id,
    ))


@pytest_asyncio.fixture
async def small_event(db_session: AsyncSession, test_user: User) -> Event:
    """An upcoming event with only 5 seats."""
    return await _persist(db_session, Event(
        title="Intimate Gig",
        description=None,
        date=datetime.now(timezone.utc) + timedelta(days=7),
        location="Back Room",
        available_seats=5,
        user_id=test_user.id,
    ))


@pytest_asyncio.fixture
async def sold_out_event(db_session: AsyncSession, test_user: User) -> Event:
    return await _persist(db_session, Event(
        title="Sold Out Show",
        description="No seats left",
        date=datetime.now(timezone.utc) + timedelta(days=30),
        location="Full Venue",
        available_seats=0,
        user_id=test_user.id,
    ))


@pytest_asyncio.fixture
async def past_event(db_session: AsyncSession, other_user: User) -> Event:
    """An event owned by other_user that took place a year ago."""
    return await _persist(db_session, Event(
        title="Last Year",
        description=None,
        date=datetime.now(timezone.utc) - timedelta(days=365),
        location="Main Hall",
        available_seats=10,
        user_id=other_user.id,
    ))


@pytest_asyncio.fixture
async def session_factory(db_session: AsyncSession) -> async_sessionmaker:
    """Independent sessions on the test database, one per simulated request."""
    return TestSessionLocal
