"""Conversation repository."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from support_desk.db.repositories.base import BaseRepository
from support_desk.models import Agent, Conversation, ConversationStatus


class ConversationRepository(BaseRepository[Conversation]):
    """Repository for conversation operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Conversation)

    async def list_resolution_candidates(self, organization_id: UUID) -> list[Conversation]:
        """Get every conversation that may belong to an organization's client.

        Includes conversations of all the organization's agents plus legacy
        conversations of the organization that never got an agent link. Rows
        with no tenant at all are never returned. Phone matching happens in
        process because stored phones are not reliably normalized.
        """
        stmt = (
            select(Conversation)
            .outerjoin(Agent, Conversation.agent_id == Agent.id)
            .where(
                or_(
                    Agent.organization_id == organization_id,
                    and_(
                        Conversation.agent_id.is_(None),
                        Conversation.organization_id == organization_id,
                    ),
                )
            )
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list(
        self,
        *,
        organization_id: UUID,
        skip: int = 0,
        limit: int = 50,
        status: ConversationStatus | None = None,
        agent_id: UUID | None = None,
    ) -> tuple[list[Conversation], int]:
        """List an organization's conversations, most recently active first."""
        base_query = (
            select(Conversation)
            .join(Agent, Conversation.agent_id == Agent.id)
            .where(Agent.organization_id == organization_id)
        )

        if status:
            base_query = base_query.where(Conversation.status == status)

        if agent_id:
            base_query = base_query.where(Conversation.agent_id == agent_id)

        count_stmt = select(func.count()).select_from(base_query.subquery())
        total_result = await self.session.execute(count_stmt)
        total = total_result.scalar() or 0

        stmt = (
            base_query.order_by(Conversation.last_message_at.desc()).offset(skip).limit(limit)
        )
        result = await self.session.execute(stmt)
        items = list(result.scalars().all())

        return items, total

    async def get_by_organization(
        self, organization_id: UUID, conversation_id: UUID
    ) -> Conversation | None:
        """Get a conversation ensuring its agent belongs to the organization."""
        stmt = (
            select(Conversation)
            .join(Agent, Conversation.agent_id == Agent.id)
            .where(
                Conversation.id == conversation_id,
                Agent.organization_id == organization_id,
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_all(self) -> list[Conversation]:
        """Get every conversation, oldest first."""
        stmt = select(Conversation).order_by(Conversation.created_at)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
