"""
RoomLedger Backend — Database Session Management
==================================================

What:  Async SQLAlchemy engine, session factory, FastAPI dependency and the
       startup schema bootstrap.
How:   Creates an async engine with connection pooling, provides a session
       dependency that commits on success and rolls back on error.
Who:   Used by route handlers via FastAPI's dependency injection system and by
       the application lifespan.

Transaction Boundary:
    One session (and one transaction) per request. Operations that issue more
    than one statement (roommate rename + expense cascade, roommate upsert +
    expense insert) are therefore atomic: either every statement of the
    request is committed or none is.

Schema Bootstrap:
    init_schema() runs `CREATE TABLE IF NOT EXISTS` for every mapped table.
    It is called once from the lifespan before the server accepts traffic;
    it is idempotent at the database level so several workers starting at
    the same time is harmless.
"""

import logging
from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from roomledger.config import settings

logger = logging.getLogger(__name__)


def _engine_options() -> Dict[str, Any]:
    """
    Pool options for the engine.

    SQLite (test suite) uses SQLAlchemy's default pool for aiosqlite, which
    does not accept sizing arguments.
    """
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=1800,  # Recycle before provider-side idle timeouts
        )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine: AsyncEngine = create_async_engine(settings.database_url, **_engine_options())

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: returned ORM rows stay readable after commit
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object between init_schema() and Alembic.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back the transaction and re-raises
        5. Always: closes the session (returns connection to pool)

    Raises:
        Any database exception propagates to the global error handler.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def init_schema(bind: AsyncEngine | None = None) -> None:
    """
    What:  Ensures the `roommates` and `expenses` tables exist.
    When:  Once, during application startup (lifespan), before serving.
    How:   metadata.create_all with checkfirst, so repeat runs are no-ops.

    Errors are not caught: a schema that cannot be created aborts startup.
    """
    # Model modules register their tables on Base.metadata when imported
    from roomledger.models import Expense, Roommate  # noqa: F401

    target = bind or engine
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    logger.info("Schema ready: %s", ", ".join(sorted(Base.metadata.tables)))


async def dispose_engine() -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
