from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlmodel import SQLModel

from ...config import settings


def _async_url(database_url: str) -> str:
    if database_url.startswith("sqlite:///"):
        return database_url.replace("sqlite:///", "sqlite+aiosqlite:///")
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://")
    if "+aiosqlite" in database_url or "+asyncpg" in database_url:
        return database_url
    raise ValueError(f"Unsupported database URL: {database_url}")


def _get_async_engine() -> AsyncEngine:
    """Create the async engine backing the entity store."""
    async_url = _async_url(settings.effective_database_url)

    engine_kwargs: dict[str, int | bool] = {"echo": settings.db_echo}
    if "postgresql" in async_url:
        engine_kwargs.update(
            {
                "pool_size": 10,
                "max_overflow": 10,
                "pool_recycle": 3600,  # Recycle connections every hour
                "pool_pre_ping": True,  # Validate connections before use
            }
        )

    return create_async_engine(async_url, **engine_kwargs)


_async_engine: AsyncEngine | None = None


def get_async_engine() -> AsyncEngine:
    """Get the async database engine, creating it on first use."""
    global _async_engine
    if _async_engine is None:
        _async_engine = _get_async_engine()
    return _async_engine


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Get async database session with proper transaction management."""
    async with AsyncSession(get_async_engine()) as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_async_db(engine: AsyncEngine | None = None) -> None:
    """Initialize database tables using async engine."""
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def dispose_async_engine() -> None:
    global _async_engine
    if _async_engine is not None:
        await _async_engine.dispose()
        _async_engine = None
