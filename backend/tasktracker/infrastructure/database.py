"""Database Session Manager — async engine, per-request sessions, table bootstrap, health check.

Invariants:
    - A session that raises a SQLAlchemy error is rolled back and the error
      re-raised as StorageError (core/errors.py)
    - Connection pool uses pool_pre_ping for stale connection detection
    - One manager per process, created by the lifespan via init_db

Design Decisions:
    - expire_on_commit=False: the key-value maps commit after every write and
      keep reading the same rows afterwards
    - Pool sizing only applies to server databases (sqlite ignores it)
    - Most specific SQLAlchemy exception first in _ERROR_MAP
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from tasktracker.core.errors import StorageError
from tasktracker.db.base import Base
import tasktracker.models  # noqa: F401  (populates Base.metadata)

logger = logging.getLogger(__name__)

_ERROR_MAP: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "Integrity constraint violated", "commit"),
    (OperationalError, "Connection or operational error", "execute"),
    (DBAPIError, "Database driver error", "query"),
    (SQLAlchemyError, "Database operation failed", "unknown"),
)


def to_storage_error(exc: SQLAlchemyError) -> StorageError:
    for exc_type, message, operation in _ERROR_MAP:
        if isinstance(exc, exc_type):
            return StorageError(message, operation)
    return StorageError("Database operation failed", "unknown")


class DatabaseSessionManager:
    """Owns the async engine and hands out sessions for the SQL key-value maps."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session that rolls back and raises StorageError on SQLAlchemy failures."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"DB error: {e}", extra={"error_code": "STORAGE_ERROR"})
            raise to_storage_error(e) from e
        finally:
            await session.close()

    async def create_tables(self) -> None:
        """Create tasks / user_tasks if missing (alembic owns later changes)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager
