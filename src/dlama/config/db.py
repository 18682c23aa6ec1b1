"""Database engine and session management."""

from collections.abc import AsyncGenerator
from typing import Final

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel.ext.asyncio.session import AsyncSession

from .config import settings

__all__ = ["engine", "get_session"]


def _create_engine() -> AsyncEngine:
    if settings.db_url.startswith("sqlite"):
        return create_async_engine(
            settings.db_url,
            echo=settings.db_logging,
            future=settings.db_future,
            connect_args={"timeout": settings.db_timeout},
        )

    return create_async_engine(
        settings.db_url,
        echo=settings.db_logging,
        future=settings.db_future,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_recycle=settings.db_pool_recycle,
        pool_pre_ping=settings.db_pool_pre_ping,
    )


engine: Final = _create_engine()


async def get_session() -> AsyncGenerator[AsyncSession]:
    """Yield a database session bound to the application engine."""
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session
