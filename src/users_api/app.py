"""
User Management API Server
CRUD over the users table, health check and API documentation root.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from users_api import __version__
from users_api.config.settings import Settings, log_settings
from users_api.database.connection import create_db_pool, close_db_pool
from users_api.database.schema import init_schema
from users_api.api.routes import health, root, users
from users_api.utils.error_handling import setup_error_handling

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, db_pool=None) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        settings: Runtime configuration (read from the environment when omitted)
        db_pool: Pre-built pool to use instead of connecting with ``settings``.
            The application does not close a pool it did not create.
    """
    if settings is None:
        settings = Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Connect, bootstrap the schema, then serve"""
        log_settings(settings)
        owns_pool = db_pool is None
        try:
            pool = await create_db_pool(settings) if owns_pool else db_pool
        except Exception as e:
            logger.critical(f"Database connection failed, refusing to start: {e}")
            raise

        try:
            await init_schema(pool)
        except Exception as e:
            logger.critical(f"Database initialization failed, refusing to start: {e}")
            if owns_pool:
                await close_db_pool(pool)
            raise

        app.state.db_pool = pool
        logger.info("Database initialized")
        try:
            yield
        finally:
            app.state.db_pool = None
            if owns_pool:
                await close_db_pool(pool)

    app = FastAPI(
        title="User Management API",
        description="CRUD operations over users with a database health check",
        version=__version__,
        lifespan=lifespan
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    setup_error_handling(app)

    app.include_router(root.router, tags=["Documentation"])
    app.include_router(health.router, tags=["Health"])
    app.include_router(users.router, prefix="/users", tags=["Users"])
    # Must stay last
    app.include_router(root.fallback_router)

    return app
