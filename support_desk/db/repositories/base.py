"""Base repository with generic operations."""

from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from support_desk.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Base repository with generic operations.

    Writes only flush; the caller owns the transaction and commits once all
    of its steps are staged.
    """

    def __init__(self, session: AsyncSession, model: type[ModelT]):
        self.session = session
        self.model = model

    async def get(self, id: UUID) -> ModelT | None:
        """Get a single record by ID."""
        return await self.session.get(self.model, id)

    async def add(self, **kwargs) -> ModelT:
        """Stage a new record in the current transaction without committing."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        return instance
