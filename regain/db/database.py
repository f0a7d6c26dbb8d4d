"""Database connection and session management."""
import logging
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from regain.config.settings import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def create_primary_engine(database_url: str | None = None) -> AsyncEngine:
    """Create the async engine for the primary database."""
    url = database_url or settings.database_url
    kwargs = {"echo": settings.database_echo}
    if not url.startswith("sqlite"):
        kwargs.update(pool_size=10, max_overflow=10, pool_pre_ping=True, pool_recycle=300)
    return create_async_engine(url, **kwargs)


def create_session_maker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
    )


# Create primary engine
engine = create_primary_engine()

async_session_maker = create_session_maker(engine)


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


async def get_db() -> AsyncIterator[AsyncSession]:
    """
    Dependency that provides a database session.

    Commits on success and rolls back when the request raises.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db(bind: AsyncEngine | None = None):
    """Initialize database tables."""
    # Import models so their tables are registered on Base.metadata
    import regain.models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialized")
