"""Audit log repository."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from support_desk.db.repositories.base import BaseRepository
from support_desk.models import AuditAction, AuditLog, User


class AuditLogRepository(BaseRepository[AuditLog]):
    """Repository for the append-only audit trail."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, AuditLog)

    async def list(
        self,
        *,
        organization_id: UUID,
        skip: int = 0,
        limit: int = 50,
        conversation_id: UUID | None = None,
        action: AuditAction | None = None,
    ) -> tuple[list[AuditLog], int]:
        """List audit entries written by the organization's users, newest first."""
        base_query = (
            select(AuditLog)
            .join(User, AuditLog.user_id == User.id)
            .where(User.organization_id == organization_id)
        )

        if conversation_id:
            base_query = base_query.where(AuditLog.conversation_id == conversation_id)

        if action:
            base_query = base_query.where(AuditLog.action == action)

        count_stmt = select(func.count()).select_from(base_query.subquery())
        total_result = await self.session.execute(count_stmt)
        total = total_result.scalar() or 0

        stmt = base_query.order_by(AuditLog.created_at.desc()).offset(skip).limit(limit)
        result = await self.session.execute(stmt)
        items = list(result.scalars().all())

        return items, total

    async def list_for_conversation(self, conversation_id: UUID) -> list[AuditLog]:
        """Get a conversation's audit entries, oldest first."""
        stmt = (
            select(AuditLog)
            .where(AuditLog.conversation_id == conversation_id)
            .order_by(AuditLog.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
