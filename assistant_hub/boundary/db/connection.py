"""
Database connection management.

Provides the async SQLAlchemy engine and the session factory used for
request-scoped and background database sessions.

Dependencies: sqlalchemy, assistant_hub.configs
System role: Database connection lifecycle management
"""

from functools import lru_cache

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from assistant_hub.configs import get_settings


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    """Turn on FK enforcement so ON DELETE CASCADE/SET NULL apply on SQLite."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_async_engine(url: str, echo: bool = False, **kwargs) -> AsyncEngine:
    """
    Create an async engine for the given URL.

    SQLite engines get foreign key enforcement switched on for every
    connection, matching PostgreSQL cascade semantics.

    Args:
        url: SQLAlchemy async database URL
        echo: Echo SQL statements to logs
        **kwargs: Extra create_async_engine arguments (pool sizing, poolclass)

    Returns:
        AsyncEngine: Configured async engine
    """
    engine = create_async_engine(url, echo=echo, **kwargs)
    if url.startswith("sqlite"):
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


@lru_cache
def get_async_engine() -> AsyncEngine:
    """
    Get the process-wide async SQLAlchemy engine.

    Pool sizing comes from DatabaseSettings; pool_pre_ping=True verifies
    connections before use to detect stale/broken connections early.
    The engine is created once and reused.

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine

    Usage:
        engine = get_async_engine()
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
    """
    db_config = get_settings().database

    if db_config.is_sqlite:
        return build_async_engine(db_config.async_database_url, echo=db_config.echo_sql)

    return build_async_engine(
        db_config.async_database_url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


def make_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Create an async session factory bound to an engine.

    autoflush=False and expire_on_commit=False give explicit transaction
    control; objects stay readable after commit.

    Args:
        engine: Async engine to bind

    Returns:
        async_sessionmaker: Async session factory
    """
    return async_sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )


@lru_cache
def get_async_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Get the async session factory for the process-wide engine.

    Returns:
        async_sessionmaker: Async session factory configured for manual transaction control

    Usage:
        SessionFactory = get_async_session_factory()
        async with SessionFactory() as session:
            session.add(obj)
            await session.commit()
    """
    return make_session_factory(get_async_engine())
