"""
VisitorBook Backend: Store Handle and Session Management
==========================================================

What:  The `Database` store handle (engine, session factory, schema
       initialization, teardown) and the per-request session dependency.
How:   The app factory constructs one `Database`, stores it on
       `app.state.database`, calls `init()` at startup and `dispose()` at
       shutdown. Routes receive sessions through `get_db_session`, which
       commits on success and rolls back on error.
Who:   Used by main.py (lifecycle), route handlers (sessions), and tests.

Connection Pooling:
    pool_size / max_overflow bound the number of concurrent outstanding
    queries. pool_pre_ping validates a connection on checkout and
    pool_recycle=3600 replaces connections older than an hour.
    SQLite (tests) ignores the sizing arguments.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, AsyncIterator, Dict, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import DBAPIError, IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import Settings
from app.exceptions import StoreError, StoreUnavailable

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models register on this metadata, which `Database.init()` uses
    for idempotent schema creation.
    """
    pass


# ── Store Handle ──────────────────────────────────────────────────────────
class Database:
    """
    Explicitly constructed handle to the relational store.

    Lifecycle:
        1. __init__: builds the engine and session factory (no I/O yet)
        2. init():   creates tables if absent, seeds the visitor counter row
        3. session(): unit-of-work sessions for services and routes
        4. dispose(): closes every pooled connection

    Example:
        database = Database("sqlite+aiosqlite:///./visitorbook.db")
        await database.init()
        async with database.session() as session:
            ...
        await database.dispose()
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 10,
        max_overflow: int = 5,
        pool_pre_ping: bool = True,
        echo: bool = False,
    ):
        self.url = url
        engine_kwargs: Dict[str, Any] = {
            "pool_pre_ping": pool_pre_ping,
            "pool_recycle": 3600,
            "echo": echo,
        }
        # SQLite pools (StaticPool for :memory:) reject queue sizing arguments
        if make_url(url).get_backend_name() != "sqlite":
            engine_kwargs["pool_size"] = pool_size
            engine_kwargs["max_overflow"] = max_overflow

        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)

        # expire_on_commit=False: returned ORM objects stay readable after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Builds a store handle from application settings."""
        return cls(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            echo=settings.log_level == "DEBUG",
        )

    # ── Initialization ────────────────────────────────────────────────────
    async def init(self) -> None:
        """
        Ensure both tables exist and exactly one visitor counter row exists.

        Safe to run on every startup, including concurrently with another
        instance starting against the same store.
        """
        await self._create_schema()
        await self._ensure_counter_row()
        logger.info("Database initialized successfully")

    async def _create_schema(self) -> None:
        # Registers the visitors and messages tables on Base.metadata
        from app.models import Message, Visitor  # noqa: F401

        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except DBAPIError as e:
            # Typically another instance created a table between our check and
            # CREATE. A second pass sees the tables; a real outage fails again.
            logger.warning("Schema creation failed (%s); retrying once", type(e).__name__)
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

    async def _ensure_counter_row(self) -> None:
        from app.models import COUNTER_ID, Visitor

        async with self.session_factory() as session:
            if await session.get(Visitor, COUNTER_ID) is not None:
                return
            session.add(Visitor(id=COUNTER_ID, count=0))
            try:
                await session.commit()
                logger.info("Visitor counter row created (count=0)")
            except IntegrityError:
                # Primary key collision: a concurrent startup inserted it first
                await session.rollback()
                logger.info("Visitor counter row already created by another instance")

    # ── Sessions ──────────────────────────────────────────────────────────
    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Unit-of-work session: commits on success, rolls back on any error.

        The session is closed (connection returned to the pool) on exit.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def ping(self) -> None:
        """Runs SELECT 1; raises if the store cannot be reached."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    # ── Teardown ──────────────────────────────────────────────────────────
    async def dispose(self) -> None:
        """Gracefully closes all connections in the pool."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    The store handle comes from `app.state.database` (set by create_app),
    so tests can point the app at their own store.

    Example usage in a route:
        @router.get("/messages")
        async def list_messages(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session


# ── Error Translation ─────────────────────────────────────────────────────
def translate_store_error(
    exc: Exception,
    message: str,
    context: Optional[Dict[str, Any]] = None,
) -> StoreError:
    """
    Convert a low-level persistence exception into an application StoreError.

    Connection-level failures become StoreUnavailable; everything else is a
    plain StoreError carrying `message`. The underlying exception type goes
    into the (log-only) context.
    """
    ctx = dict(context or {})
    ctx["error_type"] = type(exc).__name__
    ctx["detail"] = str(exc)

    if isinstance(exc, (OperationalError, InterfaceError, OSError)):
        return StoreUnavailable(context=ctx)
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return StoreUnavailable(context=ctx)
    return StoreError(message=message, context=ctx)
