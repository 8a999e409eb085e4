# 📄 File: sprout/shared/infrastructure/database/connection.py
#
# 🧭 Purpose (Layman Explanation):
# Opens and looks after the pool of connections to the marketplace database,
# checking that the database answers before the app starts serving requests.
#
# 🧪 Purpose (Technical Summary):
# Async SQLAlchemy engine lifecycle (create, health check with retry, dispose)
# plus the declarative Base shared by every module's ORM models.
#
# 🔗 Dependencies:
# - sqlalchemy.ext.asyncio (create_async_engine, AsyncEngine)
# - asyncpg in production, aiosqlite for local and test databases
# - sprout.shared.config.settings
#
# 🔄 Connected Modules / Calls From:
# - sprout.main lifespan (init/close)
# - sprout.shared.infrastructure.database.session (engine for sessions)
# - All infrastructure/database/models.py files (Base)
# - migrations/env.py (metadata)

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from sprout.shared.config.settings import get_settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all Sprout ORM models."""


class DatabaseConnectionManager:
    """
    Manages database connections with connection pooling,
    health monitoring, and automatic retry logic.
    """

    def __init__(self):
        self._engine: Optional[AsyncEngine] = None
        self._health_check_query = text("SELECT 1")
        self._retry_attempts = 3
        self._retry_delay = 1.0

    def _build_connection_params(self) -> Dict[str, Any]:
        """Build SQLAlchemy connection parameters from settings."""
        settings = get_settings()
        url = settings.database_url
        params: Dict[str, Any] = {
            "url": url,
            "echo": False,
            "pool_pre_ping": True,
        }

        # Pool tuning only applies to real server databases
        if url.startswith("postgresql"):
            params.update({
                "pool_recycle": settings.DB_POOL_RECYCLE,
                "pool_size": settings.DB_POOL_SIZE,
                "max_overflow": settings.DB_MAX_OVERFLOW,
                "pool_timeout": settings.DB_POOL_TIMEOUT,
                "connect_args": {
                    "server_settings": {
                        "application_name": "sprout_backend",
                        "jit": "off"
                    },
                    "command_timeout": 60,
                    "statement_cache_size": 0,
                },
            })
        return params

    async def initialize(self) -> None:
        """Initialize database engine with connection pooling."""
        if self._engine is not None:
            logger.warning("Database engine already initialized")
            return

        logger.info("Initializing database connection pool...")
        self._engine = create_async_engine(**self._build_connection_params())

        health = await self.health_check()
        if health["status"] != "healthy":
            await self.close()
            raise RuntimeError(health.get("error", "Database unavailable"))

        logger.info("✅ Database connection pool initialized")

    async def health_check(self) -> dict:
        """
        Perform database health check and return structured status.
        """
        if self._engine is None:
            return {
                "status": "unhealthy",
                "error": "Database engine not initialized",
                "timestamp": datetime.now(timezone.utc).isoformat()
            }

        for attempt in range(self._retry_attempts):
            try:
                async with self._engine.connect() as conn:
                    result = await conn.execute(self._health_check_query)
                    result.scalar()

                return {
                    "status": "healthy",
                    "timestamp": datetime.now(timezone.utc).isoformat()
                }

            except Exception as e:
                logger.warning(
                    f"Database health check failed (attempt {attempt + 1}/{self._retry_attempts}): {e}"
                )
                if attempt < self._retry_attempts - 1:
                    await asyncio.sleep(self._retry_delay * (2 ** attempt))

        logger.error("Database health check failed after all retry attempts")
        return {
            "status": "unhealthy",
            "error": "Database health check failed after all retry attempts",
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    async def close(self) -> None:
        """Close database engine and all connections."""
        if self._engine is None:
            return

        logger.info("Closing database connection pool...")
        await self._engine.dispose()
        self._engine = None
        logger.info("✅ Database connection pool closed")

    @property
    def engine(self) -> Optional[AsyncEngine]:
        return self._engine

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None


# Global database connection manager instance
db_manager = DatabaseConnectionManager()


async def init_database() -> None:
    """Initialize the global database connection manager."""
    await db_manager.initialize()


async def close_database() -> None:
    """Close the global database connection manager."""
    await db_manager.close()


def get_database_engine() -> AsyncEngine:
    """
    Get the database engine instance.

    Raises:
        RuntimeError: If database is not initialized
    """
    if not db_manager.is_initialized:
        raise RuntimeError("Database not initialized. Call init_database() first.")

    return db_manager.engine


async def database_health_check() -> dict:
    return await db_manager.health_check()
