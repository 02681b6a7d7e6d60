"""Agent management endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query

from support_desk.api.deps import CurrentUser, DbSession, require_organization
from support_desk.core.exceptions import NotFoundError
from support_desk.core.security import generate_agent_token
from support_desk.db.repositories import AgentRepository, AuditLogRepository
from support_desk.models import Agent, AuditAction, User
from support_desk.schemas import AgentCreate, AgentDetail, AgentList, AgentUpdate

router = APIRouter(prefix="/agents", tags=["agents"])


async def _get_agent(db: DbSession, user: User, agent_id: UUID) -> Agent:
    agent = await AgentRepository(db).get_by_organization(require_organization(user), agent_id)
    if not agent:
        raise NotFoundError("Agent", str(agent_id))
    return agent


@router.get("", response_model=AgentList)
async def list_agents(
    db: DbSession,
    user: CurrentUser,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    is_active: bool | None = Query(None, alias="isActive"),
):
    """List the organization's agents."""
    repo = AgentRepository(db)
    items, total = await repo.list(
        organization_id=require_organization(user),
        skip=skip,
        limit=limit,
        is_active=is_active,
    )
    return AgentList(items=items, total=total, skip=skip, limit=limit)


@router.post("", response_model=AgentDetail, status_code=201)
async def create_agent(data: AgentCreate, db: DbSession, user: CurrentUser):
    """Create a new agent. A token is generated when none is given."""
    agent = await AgentRepository(db).add(
        organization_id=require_organization(user),
        name=data.name,
        webhook_url=data.webhook_url,
        api_token=data.api_token or generate_agent_token(),
        webhook_auth=data.webhook_auth,
        is_active=True,
    )
    await AuditLogRepository(db).add(
        user_id=user.id,
        agent_id=agent.id,
        action=AuditAction.CREATE_AGENT,
        details=f"Created agent {agent.name}",
    )
    await db.commit()
    await db.refresh(agent)
    return agent


@router.get("/{agent_id}", response_model=AgentDetail)
async def get_agent(agent_id: UUID, db: DbSession, user: CurrentUser):
    """Get agent details."""
    return await _get_agent(db, user, agent_id)


@router.put("/{agent_id}", response_model=AgentDetail)
async def update_agent(agent_id: UUID, data: AgentUpdate, db: DbSession, user: CurrentUser):
    """Update agent configuration."""
    agent = await _get_agent(db, user, agent_id)

    # Explicit nulls leave the field unchanged
    update_data = data.model_dump(exclude_unset=True, exclude_none=True)
    for key, value in update_data.items():
        setattr(agent, key, value)

    changed = ", ".join(sorted(update_data)) or "nothing"
    await AuditLogRepository(db).add(
        user_id=user.id,
        agent_id=agent.id,
        action=AuditAction.UPDATE_AGENT,
        details=f"Updated agent {agent.name}: {changed}",
    )
    await db.commit()
    await db.refresh(agent)
    return agent


@router.delete("/{agent_id}", status_code=204)
async def delete_agent(agent_id: UUID, db: DbSession, user: CurrentUser):
    """Deactivate an agent. Its conversations are kept."""
    agent = await _get_agent(db, user, agent_id)
    agent.is_active = False
    await AuditLogRepository(db).add(
        user_id=user.id,
        agent_id=agent.id,
        action=AuditAction.DELETE_AGENT,
        details=f"Deactivated agent {agent.name}",
    )
    await db.commit()
