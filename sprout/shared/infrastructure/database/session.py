# 📄 File: sprout/shared/infrastructure/database/session.py
#
# 🧭 Purpose (Layman Explanation):
# Gives every request its own clean "conversation" with the database and makes sure
# a purchase or any other change is either saved completely or not at all.
#
# 🧪 Purpose (Technical Summary):
# Async SQLAlchemy session management with a FastAPI dependency, one transaction per
# request (commit on success, rollback on any exception), and a context manager for
# background jobs.
#
# 🔗 Dependencies:
# - sqlalchemy.ext.asyncio (AsyncSession, async_sessionmaker)
# - sprout/shared/infrastructure/database/connection.py (database engine)
#
# 🔄 Connected Modules / Calls From:
# - All module repository implementations (Depends(get_db_session))
# - sprout.background_jobs tasks (database_session)

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy import exc
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sprout.shared.core.exceptions import DatabaseError, SproutException
from sprout.shared.infrastructure.database.connection import get_database_engine

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """
    Manages database sessions with transaction handling and automatic cleanup.
    """

    def __init__(self):
        self._session_factory: Optional[async_sessionmaker] = None

    def initialize(self) -> None:
        """Initialize the session factory with the database engine."""
        self._session_factory = async_sessionmaker(
            get_database_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=True,
        )
        logger.info("Database session factory initialized successfully")

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get an async database session with automatic transaction management.

        Domain exceptions pass through unchanged after the rollback so the API
        still answers with their status code. Driver errors become DatabaseError.

        Yields:
            AsyncSession: Database session
        """
        if self._session_factory is None:
            raise DatabaseError("Session manager not initialized")

        session: AsyncSession = self._session_factory()

        try:
            yield session
            await session.commit()

        except SproutException:
            await session.rollback()
            raise

        except exc.SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Database error occurred, transaction rolled back: {e}")
            raise DatabaseError(f"Database operation failed: {e}") from e

        except Exception:
            await session.rollback()
            raise

        finally:
            await session.close()

    @property
    def is_initialized(self) -> bool:
        return self._session_factory is not None


# Global session manager instance
session_manager = DatabaseSessionManager()


def initialize_sessions() -> None:
    """Initialize the global database session manager."""
    session_manager.initialize()


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides database sessions.

    Usage:
        class PlantListingRepositoryImpl(PlantListingRepository):
            def __init__(self, session: AsyncSession = Depends(get_db_session)):
                ...

    Yields:
        AsyncSession: Database session, committed when the request succeeds
    """
    async with session_manager.get_session() as session:
        yield session


@asynccontextmanager
async def database_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Context manager for manual database session management.

    Use this outside of FastAPI route handlers, e.g. in Celery tasks.

    Example:
        async with database_session() as db:
            listings = PlantListingRepositoryImpl(db)
    """
    async with session_manager.get_session() as session:
        yield session
