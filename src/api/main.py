"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures the item store and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from src.adapters.repository.memory import InMemoryImportItemRepository
from src.adapters.repository.postgres import PostgresImportItemRepository, run_migrations
from src.api.v1 import router as v1_router
from src.config.settings import get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "DNS Import Wizard API v1 - Track and sequence DNS name import steps",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates the item store (PostgreSQL pool + migrations, or in-memory)
    - Closes the connection pool / clears in-memory items on shutdown
    """
    settings = get_settings()
    logging.getLogger("src").setLevel(settings.log_level)

    logger.info("Starting application...")

    pool = None
    if settings.storage_backend == "postgres":
        logger.info("Connecting to database...")
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
        )

        logger.info("Running database migrations...")
        run_migrations(pool)
        app.state.repository = PostgresImportItemRepository(pool)
    else:
        app.state.repository = InMemoryImportItemRepository()

    app.state.pool = pool

    logger.info("Application startup complete (storage: %s)", settings.storage_backend)

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")
    else:
        app.state.repository.clear()


app = FastAPI(
    title="dnsimport",
    description="DNS Import Wizard API - Step sequencing for importing DNS names into the name registry",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

# Include v1 API routes
app.include_router(v1_router, prefix="/v1")


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database (when used) are healthy.
    Raises exception if database connection fails.
    """
    pool = request.app.state.pool
    if pool is not None:
        with pool.connection() as conn:
            conn.execute("SELECT 1")

    return {"status": "healthy"}
