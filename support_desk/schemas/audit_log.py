"""Audit log schemas."""

from datetime import datetime
from uuid import UUID

from support_desk.models import AuditAction
from support_desk.schemas.common import CamelModel


class AuditLogDetail(CamelModel):
    """Schema for one audit entry."""

    id: UUID
    user_id: UUID
    conversation_id: UUID | None
    agent_id: UUID | None
    action: AuditAction
    details: str | None
    created_at: datetime


class AuditLogList(CamelModel):
    """Schema for paginated audit log list."""

    items: list[AuditLogDetail]
    total: int
    skip: int
    limit: int
