"""Database engine and session configuration."""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

# Register all models with SQLModel.metadata
import lis.models  # noqa: F401
from lis.config import settings


def build_engine(database_url: str, *, echo: bool = False) -> AsyncEngine:
    """Create an async engine with pool settings suited to the backend."""
    engine_args: dict[str, Any] = {"echo": echo, "future": True}
    if database_url.startswith("postgresql"):
        engine_args.update(
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,  # Verify connections before use
            pool_recycle=300,  # Recycle connections after 5 minutes
        )
    return create_async_engine(database_url, **engine_args)


def build_session_maker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory used by request handlers and the counter store."""
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(settings.database_url, echo=settings.debug)

async_session_maker = build_session_maker(engine)


async def get_session() -> AsyncGenerator[AsyncSession]:
    """Dependency that provides an async database session."""
    async with async_session_maker() as session:
        yield session


async def create_tables(bind: AsyncEngine | None = None) -> None:
    """Create all registered tables that do not exist yet."""
    async with (bind or engine).begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def dispose_engine() -> None:
    """Dispose of the engine and release all connections.

    Should be called during application shutdown.
    """
    await engine.dispose()
