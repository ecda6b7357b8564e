"""Database connection and session management."""
import logging
from typing import AsyncIterator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from traincycle.config.settings import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def create_primary_engine(url: str | None = None) -> AsyncEngine:
    """Create the database engine used for reads and writes."""
    url = url or settings.database_url

    if url.startswith("sqlite"):
        sqlite_engine = create_async_engine(url, echo=settings.sql_echo, future=True)
        configure_sqlite(sqlite_engine)
        return sqlite_engine

    return create_async_engine(
        url,
        echo=settings.sql_echo,
        future=True,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=30,
        pool_recycle=300,
        pool_pre_ping=True,
    )


def configure_sqlite(target: AsyncEngine) -> None:
    """Make SQLite behave like PostgreSQL for cascades and savepoints.

    Foreign keys are enforced so ON DELETE CASCADE fires, and the driver's
    implicit transaction handling is replaced by an explicit BEGIN so that
    SAVEPOINT / RELEASE nest inside the session transaction.
    """
    file_backed = target.url.database not in (None, "", ":memory:")

    @event.listens_for(target.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        if file_backed:
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA busy_timeout=30000")
        cursor.close()

    @event.listens_for(target.sync_engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN")


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


engine = create_primary_engine()

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncIterator[AsyncSession]:
    """
    Dependency that provides a database session.

    Commits when the request handler returns normally and rolls back on any
    exception, which is then re-raised for the error handlers.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db(target: AsyncEngine | None = None) -> None:
    """Create tables on the given engine (defaults to the primary one)."""
    import traincycle.models  # noqa: F401  registers mappers on Base.metadata

    target = target or engine
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ensured on %s", target.url.render_as_string(hide_password=True))


async def close_engine() -> None:
    """Dispose the primary engine's connection pool."""
    await engine.dispose()
