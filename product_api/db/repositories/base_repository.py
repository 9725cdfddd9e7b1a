"""
Base SQLAlchemy repository - shared session plumbing for concrete repositories.
Queries stay in one place so they can be optimized and reused.
"""

from typing import Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from product_api.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Generic async repository. Subclasses map rows to records."""

    def __init__(self, session: AsyncSession, model: type[ModelType]):
        self.session = session
        self.model = model

    async def _get_row(self, id: int) -> ModelType | None:
        """Fetch single row by primary key."""
        result = await self.session.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def _add(self, entity: ModelType) -> ModelType:
        """Persist new row. Caller commits session."""
        self.session.add(entity)
        await self.session.flush()  # Get ID without committing
        await self.session.refresh(entity)
        return entity

    async def _save(self, entity: ModelType) -> ModelType:
        """Flush pending changes on an existing row and reload server-side values."""
        await self.session.flush()
        await self.session.refresh(entity)
        return entity
