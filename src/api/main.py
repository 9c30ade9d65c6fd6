"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures session middleware, static uploads and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from psycopg_pool import ConnectionPool
from starlette.middleware.sessions import SessionMiddleware

from src.adapters.repository.postgres import run_migrations
from src.adapters.storage import build_avatar_storage
from src.api.routes import router
from src.config.settings import get_settings, storage_config

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {"name": "users", "description": "Signup, profile page and profile edit"},
    {"name": "account_activations", "description": "Activation links sent by email"},
    {"name": "sessions", "description": "Login and logout"},
    {"name": "pages", "description": "Home page"},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Resolves avatar storage configuration once
    - Creates database connection pool on startup
    - Runs migrations on startup
    - Closes connection pool on shutdown
    """
    settings = get_settings()

    logger.info("Starting application (environment=%s)...", settings.environment)

    config = storage_config(settings)
    app.state.avatar_storage = build_avatar_storage(config)
    logger.info("Avatar storage backend: %s", config.backend)

    logger.info("Connecting to database...")

    # Create connection pool with explicit sizing
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )

    logger.info("Running database migrations...")
    run_migrations(pool)

    # Store pool in app state for dependency injection
    app.state.pool = pool

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    pool.close()
    logger.info("Database connection pool closed")


settings = get_settings()

app = FastAPI(
    title="account-lifecycle",
    description="Account Lifecycle API - signup with email activation, "
    "session login/logout, profile editing and avatar upload",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

app.add_middleware(
    SessionMiddleware,
    secret_key=settings.secret_key,
    session_cookie=settings.session_cookie,
    https_only=settings.environment == "production",
)

app.include_router(router)

# Locally stored avatars; the directory is created on first upload
if settings.environment != "production":
    app.mount(
        settings.uploads_url_prefix,
        StaticFiles(directory=settings.upload_dir, check_dir=False),
        name="uploads",
    )


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy.
    Raises exception if database connection fails.
    """
    pool = request.app.state.pool
    with pool.connection() as conn:
        conn.execute("SELECT 1")

    return {"status": "healthy"}
