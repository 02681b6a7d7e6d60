"""Audit trail endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query

from support_desk.api.deps import CurrentUser, DbSession, require_organization
from support_desk.db.repositories import AuditLogRepository
from support_desk.models import AuditAction
from support_desk.schemas import AuditLogList

router = APIRouter(prefix="/audit-logs", tags=["audit-logs"])


@router.get("", response_model=AuditLogList)
async def list_audit_logs(
    db: DbSession,
    user: CurrentUser,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    conversation_id: UUID | None = Query(None, alias="conversationId"),
    action: AuditAction | None = None,
):
    """List audit entries written by the organization's users, newest first."""
    repo = AuditLogRepository(db)
    items, total = await repo.list(
        organization_id=require_organization(user),
        skip=skip,
        limit=limit,
        conversation_id=conversation_id,
        action=action,
    )
    return AuditLogList(items=items, total=total, skip=skip, limit=limit)
