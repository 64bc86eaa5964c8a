"""Async database session management."""

from collections.abc import AsyncGenerator

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from sentinel.config import settings
from sentinel.core.errors import ConflictError


logger = structlog.get_logger()

# Create async engine
async_engine = create_async_engine(
    settings.async_database_url,
    pool_size=settings.database_pool_size,
    max_overflow=settings.database_max_overflow,
    echo=settings.database_echo,
    pool_pre_ping=True,  # Verify connections before use
)

# Create async session factory
async_session_factory = async_sessionmaker(
    bind=async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that provides the per-request transaction.

    The session is committed when the handler returns and rolled back when
    it raises, so every write a request performs lands atomically.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def flush_or_conflict(
    session: AsyncSession,
    message: str,
    error_code: str = "conflict",
) -> None:
    """Flush pending writes, translating a unique-constraint hit to ConflictError.

    Uniqueness guards read before they write, so two concurrent writers can
    both pass the guard. The database constraint is the final authority and
    its violation surfaces here with the same error the guard would raise.
    """
    try:
        await session.flush()
    except IntegrityError as exc:
        # The caller's transaction scope owns the rollback
        logger.info("unique_constraint_violation", error_code=error_code)
        raise ConflictError(message, error_code=error_code) from exc
