"""
RoomLedger Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Points the app at a throwaway SQLite file (aiosqlite) before any
       roomledger import, so the module-level settings and engine pick it up.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock async session (service unit tests, no DB)
    ├── fresh_schema:    Empty roommates/expenses tables in the SQLite file
    └── test_client:     HTTPX AsyncClient bound to the ASGI app
"""

import os
import tempfile
from unittest.mock import AsyncMock, MagicMock

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup — must run before roomledger is imported
# ══════════════════════════════════════════════════════════════════════════

_db_dir = tempfile.mkdtemp(prefix="roomledger_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_db_dir}/test.db"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CORS_ORIGINS"] = ""

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session bound to a Postgres dialect.

    Usage:
        async def test_add(mock_db_session):
            await service.add_roommate(mock_db_session, "flat1", request)
            mock_db_session.execute.assert_awaited_once()
    """
    dialect = MagicMock()
    dialect.name = "postgresql"
    bind = MagicMock()
    bind.dialect = dialect

    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    session.get_bind = MagicMock(return_value=bind)
    return session


@pytest_asyncio.fixture
async def fresh_schema():
    """
    Drops and recreates both tables, yielding the engine.

    Disposes the pool afterwards so no connection outlives the test's
    event loop.
    """
    import roomledger.models  # noqa: F401
    from roomledger.database import Base, engine, init_schema

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await init_schema()
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def test_client(fresh_schema):
    """
    HTTPX AsyncClient talking to the FastAPI app through ASGITransport.

    The app lifespan is not run; fresh_schema has already done its work.

    Usage:
        async def test_state(test_client):
            response = await test_client.get("/api/state?hid=flat1")
            assert response.status_code == 200
    """
    from roomledger.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
