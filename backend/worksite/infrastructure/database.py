"""Database Session Manager — async connection pool with automatic rollback and health checks.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Connection pool is bounded (pool_size + max_overflow) and recycles connections
    - All SQLAlchemy exceptions mapped to StorageError (core/errors.py); driver
      detail goes to the log, never to the caller

Design Decisions:
    - One manager constructed in the FastAPI lifespan and kept on app.state;
      components receive it (or its session factory) explicitly
    - expire_on_commit=False: prevents lazy-load issues in async context
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from worksite.core.errors import StorageError

logger = logging.getLogger(__name__)

# Most specific first: IntegrityError and OperationalError are DBAPIErrors.
_FAILED_OPERATION: tuple[tuple[type[SQLAlchemyError], str], ...] = (
    (IntegrityError, "commit"),
    (OperationalError, "execute"),
    (DBAPIError, "query"),
)


def storage_operation(error: SQLAlchemyError) -> str:
    """Name the operation a SQLAlchemy error came from."""
    for error_type, operation in _FAILED_OPERATION:
        if isinstance(error, error_type):
            return operation
    return "unknown"


class DatabaseSessionManager:
    """Owns the engine and hands out sessions that roll back on any failure."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 10,
        max_overflow: int = 90,
        pool_recycle: int = 3600,
    ):
        self.engine = create_async_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
            pool_recycle=pool_recycle,
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """One unit of work; storage failures leave as StorageError."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            operation = storage_operation(e)
            logger.error(
                f"Storage {operation} failed: {type(e).__name__}: {e}",
                extra={"error_code": "STORAGE_ERROR"},
            )
            raise StorageError(operation) from e
        except BaseException:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """True when a trivial query round-trips (readiness probe)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False
        return True

    async def dispose(self) -> None:
        """Close every pooled connection. Called once on shutdown."""
        await self.engine.dispose()
        logger.info("Database engine disposed")


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session from the manager on app.state."""
    manager: DatabaseSessionManager | None = getattr(request.app.state, "db", None)
    if manager is None:
        raise RuntimeError("Database not initialized")
    async with manager.session() as session:
        yield session
