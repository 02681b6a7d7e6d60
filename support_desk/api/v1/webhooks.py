"""Inbound webhook endpoints for agent automations."""

from fastapi import APIRouter, Depends
from redis.asyncio import Redis

from support_desk.api.deps import DbSession, Notifier, get_redis
from support_desk.config import settings
from support_desk.schemas import InboundMessagePayload, InboundMessageResponse
from support_desk.services.inbound import InboundWebhookHandler
from support_desk.services.webhook_event_store import WebhookEventStore

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


async def get_event_store(redis: Redis = Depends(get_redis)) -> WebhookEventStore | None:
    """Debug inbox for received payloads, when enabled."""
    if not settings.WEBHOOK_EVENT_LOG_ENABLED:
        return None
    return WebhookEventStore(redis)


@router.post("/n8n/messages", response_model=InboundMessageResponse)
@router.post("/messages", response_model=InboundMessageResponse, include_in_schema=False)
async def receive_message(
    payload: InboundMessagePayload,
    db: DbSession,
    notifier: Notifier,
    event_store: WebhookEventStore | None = Depends(get_event_store),
):
    """Receive a client message or AI reply from an agent.

    The agent authenticates with its id and shared token in the body.
    ``senderType`` defaults to CLIENT.
    """
    handler = InboundWebhookHandler(db, notifier=notifier, event_store=event_store)
    return await handler.handle(payload)
