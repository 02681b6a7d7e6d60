"""Agent repository."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from support_desk.db.repositories.base import BaseRepository
from support_desk.models import Agent


class AgentRepository(BaseRepository[Agent]):
    """Repository for agent operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Agent)

    async def list(
        self,
        *,
        organization_id: UUID,
        skip: int = 0,
        limit: int = 50,
        is_active: bool | None = None,
    ) -> tuple[list[Agent], int]:
        """List agents for an organization with optional filtering."""
        base_query = select(Agent).where(Agent.organization_id == organization_id)

        if is_active is not None:
            base_query = base_query.where(Agent.is_active == is_active)

        count_stmt = select(func.count()).select_from(base_query.subquery())
        total_result = await self.session.execute(count_stmt)
        total = total_result.scalar() or 0

        stmt = base_query.order_by(Agent.name).offset(skip).limit(limit)
        result = await self.session.execute(stmt)
        items = list(result.scalars().all())

        return items, total

    async def get_by_organization(self, organization_id: UUID, agent_id: UUID) -> Agent | None:
        """Get an agent ensuring it belongs to the organization."""
        stmt = select(Agent).where(
            Agent.id == agent_id,
            Agent.organization_id == organization_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def organization_map(self) -> dict[UUID, UUID]:
        """Map every agent id to its organization id."""
        result = await self.session.execute(select(Agent.id, Agent.organization_id))
        return {agent_id: organization_id for agent_id, organization_id in result.all()}
