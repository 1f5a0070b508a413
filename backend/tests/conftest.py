"""Shared test configuration and fixtures.

Uses a transactional rollback strategy per test for full isolation:
- Each test gets its own transaction that rolls back after the test.
- The test database `rentalops_test` must exist before running tests;
  database-backed tests are skipped when it cannot be reached.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from factories import bearer, make_booking, make_property, make_user
from rentalops.config import settings
from rentalops.database import Base, get_db, make_engine
from rentalops.main import app
from rentalops.models import Booking, Property, User

# ---------------------------------------------------------------------------
# Test database engine: same PG instance, `rentalops_test` DB.
# Replace the last path segment of the configured URL with the test DB name.
# ---------------------------------------------------------------------------

_base_url = settings.async_database_url
TEST_DATABASE_URL = _base_url.rsplit("/", 1)[0] + "/rentalops_test"


def _make_engine():
    return make_engine(TEST_DATABASE_URL, echo=False, pool_size=5)


# ---------------------------------------------------------------------------
# Session-scoped: create / drop all tables once per test session
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def test_engine():
    """Create a session-scoped engine tied to the session event loop."""
    engine = _make_engine()
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as exc:  # asyncpg raises its own types for refused, auth and missing-db errors
        await engine.dispose()
        pytest.skip(f"Test database not available: {exc}")
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def setup_test_db(test_engine):
    """Create all tables at the start of the session and drop them at the end."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


# ---------------------------------------------------------------------------
# Per-test: transactional rollback for isolation
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def db_session(test_engine, setup_test_db) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session wrapped in a transaction that always rolls back.

    Savepoints (``begin_nested``) used by code under test stay inside it.
    """
    async with test_engine.connect() as connection:
        transaction = await connection.begin()
        session = AsyncSession(
            bind=connection,
            expire_on_commit=False,
            join_transaction_mode="create_savepoint",
        )

        try:
            yield session
        finally:
            await session.close()
            await transaction.rollback()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to use the test DB session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Convenience fixtures: owner, property, booking
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create and return a property owner directly in the DB."""
    return await make_user(db_session)


@pytest_asyncio.fixture
async def auth_headers(test_user: User) -> dict[str, str]:
    """Return Authorization headers for the test user."""
    return bearer(test_user)


@pytest_asyncio.fixture
async def test_property(db_session: AsyncSession, test_user: User) -> Property:
    return await make_property(db_session, test_user)


@pytest_asyncio.fixture
async def test_booking(db_session: AsyncSession, test_property: Property) -> Booking:
    return await make_booking(db_session, test_property)
