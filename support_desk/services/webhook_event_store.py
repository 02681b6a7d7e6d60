"""Debug inbox of received inbound webhook payloads, kept in Redis with expiry."""

import json
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from redis.asyncio import Redis

from support_desk.config import settings

REDACTED = "***"
_SECRET_FIELDS = ("apiToken", "api_token")


def redact(payload: dict[str, Any]) -> dict[str, Any]:
    """Copy of ``payload`` with agent secrets masked."""
    return {
        key: (REDACTED if key in _SECRET_FIELDS and value else value)
        for key, value in payload.items()
    }


class WebhookEventStore:
    """Keeps the most recent inbound webhook events for troubleshooting agents."""

    EVENTS_KEY = "support_desk:webhook_events"

    def __init__(
        self,
        redis: Redis,
        max_events: int | None = None,
        ttl: int | None = None,
    ):
        self.redis = redis
        self.max_events = max_events or settings.WEBHOOK_EVENT_LOG_MAX
        self.ttl = ttl or settings.WEBHOOK_EVENT_LOG_TTL

    async def record(
        self,
        agent_id: str | None,
        payload: dict[str, Any],
        status: str = "received",
    ) -> str:
        """Store a redacted event and return its id."""
        event_id = str(uuid4())
        event = {
            "id": event_id,
            "agentId": agent_id,
            "payload": redact(payload),
            "status": status,
            "error": None,
            "receivedAt": datetime.now(timezone.utc).isoformat(),
        }

        await self.redis.lpush(self.EVENTS_KEY, json.dumps(event))
        await self.redis.ltrim(self.EVENTS_KEY, 0, self.max_events - 1)
        await self.redis.expire(self.EVENTS_KEY, self.ttl)

        return event_id

    async def update_status(
        self,
        event_id: str,
        status: str,
        error: str | None = None,
        **fields: Any,
    ) -> None:
        """Set the outcome (processed, failed, rejected) of a stored event."""
        raw_events = await self.redis.lrange(self.EVENTS_KEY, 0, -1)
        for i, raw_event in enumerate(raw_events):
            event = json.loads(raw_event)
            if event["id"] == event_id:
                event.update(fields, status=status, error=error)
                await self.redis.lset(self.EVENTS_KEY, i, json.dumps(event))
                break

    async def _load(self, agent_id: str | None, status: str | None) -> list[dict]:
        events = [json.loads(e) for e in await self.redis.lrange(self.EVENTS_KEY, 0, -1)]
        if agent_id:
            events = [e for e in events if e["agentId"] == agent_id]
        if status:
            events = [e for e in events if e["status"] == status]
        return events

    async def get_events(
        self,
        limit: int = 50,
        offset: int = 0,
        agent_id: str | None = None,
        status: str | None = None,
    ) -> tuple[list[dict], int]:
        """Get recent events, newest first, with the filtered total."""
        events = await self._load(agent_id, status)
        return events[offset : offset + limit], len(events)

    async def get_event(self, event_id: str) -> dict | None:
        for event in await self._load(None, None):
            if event["id"] == event_id:
                return event
        return None

    async def clear(self) -> None:
        await self.redis.delete(self.EVENTS_KEY)
