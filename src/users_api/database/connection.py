"""
Database connection and pool management
"""

import asyncpg
import logging
from fastapi import Request

from users_api.config.settings import Settings

logger = logging.getLogger(__name__)


async def create_db_pool(settings: Settings) -> asyncpg.Pool:
    """Create the connection pool and verify the database answers"""
    db_pool = await asyncpg.create_pool(
        settings.dsn,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
        command_timeout=settings.command_timeout,
        statement_cache_size=0  # Fix for pgbouncer compatibility
    )

    # Test connection
    try:
        async with db_pool.acquire() as conn:
            await conn.fetchval("SELECT 1")
    except BaseException:
        await db_pool.close()
        raise

    logger.info("Database pool initialized successfully")
    return db_pool


async def close_db_pool(db_pool) -> None:
    """Close database connection pool"""
    if db_pool is not None:
        await db_pool.close()
    logger.info("Database connections closed")


def get_db_pool(request: Request):
    """Get the pool owned by the running application"""
    db_pool = getattr(request.app.state, "db_pool", None)
    if db_pool is None:
        raise RuntimeError("Database pool not initialized")
    return db_pool
