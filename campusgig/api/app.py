"""
FastAPI application factory.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from campusgig.api.middleware.error_handler import ErrorHandlerMiddleware
from campusgig.api.middleware.logging import LoggingMiddleware
from campusgig.api.routes import (
    health,
    jobs,
    notifications,
    profiles,
    ratings,
    users,
)
from campusgig.application.services.cache_invalidator import CacheInvalidator
from campusgig.config.logging import get_logger
from campusgig.config.settings import Settings, settings
from campusgig.infrastructure.database.connection import Database

logger = get_logger(__name__)


def create_app(
    app_settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    invalidator: Optional[CacheInvalidator] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    A database passed in is owned by the caller; otherwise one is built
    from settings on startup and disposed on shutdown.
    """
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_database = app.state.database is None
        if owns_database:
            app.state.database = Database.from_settings(app_settings)
        if app_settings.DATABASE_CREATE_TABLES:
            await app.state.database.create_all()

        logger.info(
            "Application startup",
            environment=app_settings.ENVIRONMENT,
            dialect=app.state.database.engine.dialect.name,
        )
        try:
            yield
        finally:
            logger.info("Application shutdown")
            if owns_database:
                await app.state.database.dispose()
                app.state.database = None

    app = FastAPI(
        title=app_settings.APP_NAME,
        version=app_settings.APP_VERSION,
        description="Campus task marketplace: jobs, ratings and notifications",
        openapi_url=f"{app_settings.API_PREFIX}/openapi.json"
        if app_settings.DEBUG
        else None,
        docs_url=f"{app_settings.API_PREFIX}/docs" if app_settings.DEBUG else None,
        redoc_url=f"{app_settings.API_PREFIX}/redoc" if app_settings.DEBUG else None,
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.database = database
    app.state.invalidator = invalidator or CacheInvalidator()

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add custom middleware
    ErrorHandlerMiddleware(app)
    LoggingMiddleware(app)

    # Add routes
    for module in (health, jobs, users, ratings, profiles, notifications):
        app.include_router(module.router, prefix=app_settings.API_PREFIX)

    return app
