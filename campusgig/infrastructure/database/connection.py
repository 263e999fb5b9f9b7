"""
Database connection utilities.

The ``Database`` object is the explicit store handle shared by every
component. It is created once per process and disposed on shutdown.
"""

import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from campusgig.config.logging import get_logger
from campusgig.config.settings import Settings, settings
from campusgig.infrastructure.database.models import Base

logger = get_logger(__name__)

SQLITE_BUSY_TIMEOUT_SECONDS = 30


def create_engine(
    database_url: str, app_settings: Optional[Settings] = None
) -> AsyncEngine:
    """Create async SQLAlchemy engine."""
    app_settings = app_settings or settings

    if database_url.startswith("sqlite"):
        # One connection per session so concurrent sessions see each other's
        # commits and serialize on SQLite's write lock
        return create_async_engine(
            database_url,
            echo=app_settings.DATABASE_ECHO,
            poolclass=NullPool,
            connect_args={"timeout": SQLITE_BUSY_TIMEOUT_SECONDS},
        )

    return create_async_engine(
        database_url,
        echo=app_settings.DATABASE_ECHO,
        pool_size=app_settings.DATABASE_POOL_SIZE,
        max_overflow=app_settings.DATABASE_MAX_OVERFLOW,
        pool_timeout=app_settings.DATABASE_POOL_TIMEOUT,
        pool_recycle=app_settings.DATABASE_POOL_RECYCLE,
        pool_pre_ping=True,
    )


class Database:
    """Async store handle: one engine and its session factory."""

    def __init__(self, database_url: str, app_settings: Optional[Settings] = None):
        self.database_url = database_url
        self.engine = create_engine(database_url, app_settings)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, app_settings: Optional[Settings] = None) -> "Database":
        app_settings = app_settings or settings
        return cls(app_settings.DATABASE_URL, app_settings)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Open a session for read-only work."""
        async with self.session_factory() as session:
            yield session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """Open a session inside a transaction.

        Commits once when the block exits normally; any exception rolls the
        whole unit back and propagates.
        """
        async with self.session_factory() as session:
            try:
                async with session.begin():
                    yield session
            except Exception as e:
                logger.debug(
                    "Transaction rolled back", error=str(e), error_type=type(e).__name__
                )
                raise

    async def create_all(self) -> None:
        """Create all tables (tests and local development)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created")

    async def health(self) -> Dict[str, Any]:
        """Check database health."""
        try:
            start_time = time.time()
            async with self.session() as session:
                result = await session.execute(text("SELECT 1"))
                result.fetchone()
            response_time = (time.time() - start_time) * 1000

            return {
                "status": "healthy",
                "response_time_ms": response_time,
                "dialect": self.engine.dialect.name,
            }

        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return {"status": "unhealthy", "error": str(e)}

    async def dispose(self) -> None:
        """Close all database connections."""
        await self.engine.dispose()
        logger.info("Database connections closed")
