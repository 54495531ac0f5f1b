import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import event
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool

from collabdocs.core.config import settings
from collabdocs.db.base import Base

logger = logging.getLogger(__name__)


def _is_memory_sqlite(url: str) -> bool:
    return ":memory:" in url or url in ("sqlite://", "sqlite+aiosqlite://")


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create the async engine with a bounded pool and per-dialect locking setup."""
    kwargs = {"echo": echo, "future": True}
    is_sqlite = database_url.startswith("sqlite")

    if is_sqlite:
        # sqlite3 busy timeout: how long a writer waits for the database lock
        kwargs["connect_args"] = {"timeout": settings.db_lock_timeout}
    if not _is_memory_sqlite(database_url):
        kwargs.update(
            poolclass=AsyncAdaptedQueuePool,
            pool_size=settings.db_pool_size,
            max_overflow=0,
            pool_timeout=settings.db_acquire_timeout,
            pool_pre_ping=True,
        )

    engine = create_async_engine(database_url, **kwargs)

    if is_sqlite:
        @event.listens_for(engine.sync_engine, "connect")
        def _on_connect(dbapi_connection, connection_record):
            # Driver-level BEGIN is disabled, the "begin" hook below emits our own
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        @event.listens_for(engine.sync_engine, "begin")
        def _on_begin(conn):
            # Take the write lock up front so read-then-write sequences serialize
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(bind=bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(settings.database_url, echo=settings.sql_echo)
SessionLocal = build_session_factory(engine)


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: one session per request."""
    async with SessionLocal() as session:
        yield session


@asynccontextmanager
async def unit_of_work(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Commit everything done inside the block, or roll all of it back."""
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise


async def init_db(bind: Optional[AsyncEngine] = None) -> None:
    """Create all tables (development and tests; production uses Alembic)."""
    import collabdocs.db.models  # noqa: F401  registers mappers

    target = bind or engine
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ensured")


# SQLite lock contention, as reported by the driver
_TRANSIENT_SQLITE_MESSAGES = ("database is locked", "database is busy", "database table is locked")
# PostgreSQL: lock_not_available, query_canceled (lock/statement timeout), deadlock_detected, serialization_failure
_TRANSIENT_SQLSTATES = {"55P03", "57014", "40P01", "40001"}


def is_transient_storage_error(exc: SQLAlchemyError) -> bool:
    """True for lock waits, pool exhaustion and dropped connections; False for schema or SQL faults."""
    if isinstance(exc, PoolTimeoutError):
        return True
    if not isinstance(exc, DBAPIError):
        return False
    if exc.connection_invalidated:
        return True

    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in _TRANSIENT_SQLSTATES:
        return True

    message = str(orig).lower()
    return any(marker in message for marker in _TRANSIENT_SQLITE_MESSAGES)
