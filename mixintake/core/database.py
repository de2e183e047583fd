"""
Database configuration and session management.

Async SQLAlchemy engine backing the row store. SQLite (aiosqlite) is the
default; PostgreSQL (asyncpg) gets connection pooling.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from mixintake.core.config import get_settings

# Database engine and session factory (initialized during startup)
engine: Optional[AsyncEngine] = None
async_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


def build_engine(database_url: str, echo: bool = False, **pool_kwargs) -> AsyncEngine:
    """Create an async engine, skipping pool options SQLite does not take."""
    if not (database_url.startswith("postgresql") or database_url.startswith("sqlite")):
        raise ValueError(f"Unsupported database URL: {database_url[:20]}...")

    if database_url.startswith("sqlite"):
        return create_async_engine(database_url, echo=echo)

    return create_async_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        **pool_kwargs,
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_db() -> None:
    """
    Initialize database engine and session factory, then create tables.

    This should be called during application startup.
    """
    global engine, async_session_factory

    settings = get_settings()

    engine = build_engine(
        settings.database_url,
        echo=settings.database_echo,
        pool_size=settings.database_pool_size,
        pool_recycle=settings.database_pool_recycle,
    )
    async_session_factory = build_session_factory(engine)

    # Register models on Base.metadata
    from mixintake.models import SheetRow  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """
    Close database engine.

    This should be called during application shutdown.
    """
    global engine, async_session_factory
    if engine:
        await engine.dispose()
        engine = None
        async_session_factory = None
