"""
Database table creation helpers.

Creates all tables defined in ORM models using SQLAlchemy metadata.

Dependencies: sqlalchemy, assistant_hub.boundary.db
System role: Database schema initialization

Usage:
    python -m assistant_hub.boundary.db.create_tables
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from assistant_hub.boundary.db.base import Base
from assistant_hub.boundary.db.connection import get_async_engine

# Import all models to register them with Base.metadata
from assistant_hub.boundary.db import models  # noqa: F401

logger = logging.getLogger(__name__)


async def create_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Create all database tables from registered ORM models.

    Idempotent: CREATE TABLE is only issued for missing tables, so it is
    safe to run at every startup. Existing tables remain unchanged.

    Args:
        engine: Engine to use; defaults to the configured application engine

    Raises:
        SQLAlchemyError: If the connection or table creation fails
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured", extra={"tables": sorted(Base.metadata.tables)})


async def drop_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Drop all database tables and their data.

    WARNING: Irreversible data loss. Only use in development and tests.

    Args:
        engine: Engine to use; defaults to the configured application engine
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.warning("All tables dropped")


if __name__ == "__main__":
    asyncio.run(create_all_tables())
