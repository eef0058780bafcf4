"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures exception handlers and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from psycopg import OperationalError
from psycopg_pool import PoolTimeout

from src.adapters.repository.memory import InMemoryTravelRepository
from src.adapters.repository.postgres import (
    PostgresTravelRepository,
    create_pool,
    run_migrations,
)
from src.api.routes import router
from src.config.settings import get_settings
from src.domain.exceptions import StorageUnavailable

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "travel",
        "description": "Trip catalog, client registration and trip enrollment",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates the storage repository (database pool or in-memory store)
    - Runs migrations on startup
    - Closes connection pool on shutdown
    """
    settings = get_settings()

    logger.info("Starting application...")

    if settings.storage_backend == "memory":
        logger.warning("Using in-memory storage; data is lost on shutdown")
        app.state.pool = None
        app.state.repository = InMemoryTravelRepository(
            lock_timeout_seconds=settings.lock_timeout_ms / 1000
        )
        logger.info("Application startup complete")
        yield
        logger.info("Shutting down application...")
        return

    logger.info("Connecting to database...")
    pool = create_pool(settings)

    logger.info("Running database migrations...")
    run_migrations(pool)

    # Store pool and repository in app state for dependency injection
    app.state.pool = pool
    app.state.repository = PostgresTravelRepository(pool)

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    pool.close()
    logger.info("Database connection pool closed")


app = FastAPI(
    title="travel-agency",
    description="Travel Agency API - Trip catalog and capacity-limited trip enrollment",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

app.include_router(router, prefix="/api")


@app.exception_handler(StorageUnavailable)
async def storage_unavailable_handler(request: Request, exc: StorageUnavailable) -> JSONResponse:
    """Map storage connectivity failures and timeouts to 503."""
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Storage unavailable"},
    )


@app.get("/health")
def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy,
    503 if the database cannot be reached.
    """
    pool = getattr(request.app.state, "pool", None)
    if pool is not None:
        try:
            with pool.connection() as conn:
                conn.execute("SELECT 1")
        except (OperationalError, PoolTimeout) as e:
            logger.error("Health check failed: %s", e)
            raise StorageUnavailable("Storage unavailable") from e

    return {"status": "healthy"}
