"""Debug endpoints for viewing received inbound webhook events."""

from fastapi import APIRouter, Query

from support_desk.api.deps import CurrentUser, RedisClient
from support_desk.core.exceptions import ForbiddenError, NotFoundError
from support_desk.models import User, UserRole
from support_desk.services.webhook_event_store import WebhookEventStore

router = APIRouter(prefix="/debug", tags=["debug"])


def _require_admin(user: User) -> None:
    if user.role not in (UserRole.ADMIN, UserRole.SUPER_ADMIN):
        raise ForbiddenError("Only administrators can inspect webhook events")


@router.get("/webhooks")
async def list_webhook_events(
    redis: RedisClient,
    user: CurrentUser,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    agent_id: str | None = Query(None, alias="agentId"),
    status: str | None = None,
):
    """List recent inbound webhook events, newest first."""
    _require_admin(user)
    store = WebhookEventStore(redis)
    events, total = await store.get_events(
        limit=limit,
        offset=skip,
        agent_id=agent_id,
        status=status,
    )
    return {"items": events, "total": total, "skip": skip, "limit": limit}


@router.get("/webhooks/{event_id}")
async def get_webhook_event(event_id: str, redis: RedisClient, user: CurrentUser):
    """Get single webhook event details."""
    _require_admin(user)
    event = await WebhookEventStore(redis).get_event(event_id)
    if not event:
        raise NotFoundError("Webhook event", event_id)
    return event


@router.delete("/webhooks")
async def clear_webhook_events(redis: RedisClient, user: CurrentUser):
    """Clear all stored webhook events."""
    _require_admin(user)
    await WebhookEventStore(redis).clear()
    return {"status": "cleared"}
