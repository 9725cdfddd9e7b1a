"""
Async database session management.
One session per request, committed when the handler returns and rolled back on error.
"""

from collections.abc import AsyncGenerator
from typing import Annotated, Any

from fastapi import Depends
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from product_api.config import get_settings

settings = get_settings()


def engine_options(database_url: str) -> dict[str, Any]:
    """Pool sizing applies to server databases; SQLite keeps SQLAlchemy's default pool."""
    options: dict[str, Any] = {"echo": settings.debug, "pool_pre_ping": True}
    if make_url(database_url).get_backend_name() != "sqlite":
        options.update(pool_size=settings.db_pool_size, max_overflow=settings.db_max_overflow)
    return options


engine = create_async_engine(settings.database_url, **engine_options(settings.database_url))

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


DbSession = Annotated[AsyncSession, Depends(get_db)]
