"""Message repository."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from support_desk.db.repositories.base import BaseRepository
from support_desk.models import Message


class MessageRepository(BaseRepository[Message]):
    """Repository for message operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Message)

    async def list_for_conversation(
        self,
        conversation_id: UUID,
        *,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[Message]:
        """List a conversation's messages in the order they were written."""
        stmt = (
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at, Message.id)
            .offset(skip)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_for_conversation(self, conversation_id: UUID) -> int:
        """Count a conversation's messages."""
        stmt = select(func.count()).where(Message.conversation_id == conversation_id)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def reassign(self, from_conversation_ids: list[UUID], to_conversation_id: UUID) -> int:
        """Move messages onto another conversation inside the current transaction."""
        if not from_conversation_ids:
            return 0
        stmt = (
            update(Message)
            .where(Message.conversation_id.in_(from_conversation_ids))
            .values(conversation_id=to_conversation_id)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0
