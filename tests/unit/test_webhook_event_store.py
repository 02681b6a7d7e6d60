"""Unit tests for WebhookEventStore."""

import pytest

from support_desk.services.webhook_event_store import REDACTED, WebhookEventStore, redact


class InMemoryRedis:
    """The handful of list commands the event store uses."""

    def __init__(self):
        self.lists: dict[str, list[str]] = {}
        self.ttl: dict[str, int] = {}

    async def lpush(self, key, value):
        self.lists.setdefault(key, []).insert(0, value)

    async def ltrim(self, key, start, end):
        self.lists[key] = self.lists.get(key, [])[start : end + 1]

    async def expire(self, key, seconds):
        self.ttl[key] = seconds

    async def lrange(self, key, start, end):
        items = self.lists.get(key, [])
        return items[start:] if end == -1 else items[start : end + 1]

    async def lset(self, key, index, value):
        self.lists[key][index] = value

    async def delete(self, key):
        self.lists.pop(key, None)


class TestWebhookEventStore:
    """Tests for WebhookEventStore."""

    def test_redact_masks_token_only(self):
        assert redact({"apiToken": "secret", "message": "hi"}) == {
            "apiToken": REDACTED,
            "message": "hi",
        }
        assert redact({"apiToken": None}) == {"apiToken": None}

    @pytest.mark.asyncio
    async def test_record_and_update(self):
        redis = InMemoryRedis()
        store = WebhookEventStore(redis, max_events=10, ttl=60)

        event_id = await store.record("agent-1", {"apiToken": "secret", "message": "hi"})
        await store.update_status(event_id, "processed", conversationId="c-1")

        event = await store.get_event(event_id)
        assert event["status"] == "processed"
        assert event["conversationId"] == "c-1"
        assert event["payload"]["apiToken"] == REDACTED
        assert redis.ttl[store.EVENTS_KEY] == 60

    @pytest.mark.asyncio
    async def test_cap_and_filters(self):
        store = WebhookEventStore(InMemoryRedis(), max_events=3, ttl=60)
        for i in range(5):
            await store.record(f"agent-{i % 2}", {"message": str(i)})

        events, total = await store.get_events()
        assert total == 3
        assert [e["payload"]["message"] for e in events] == ["4", "3", "2"]

        filtered, filtered_total = await store.get_events(agent_id="agent-0")
        assert filtered_total == 2
        assert {e["agentId"] for e in filtered} == {"agent-0"}

    @pytest.mark.asyncio
    async def test_clear(self):
        store = WebhookEventStore(InMemoryRedis(), max_events=3, ttl=60)
        await store.record("agent-1", {"message": "hi"})

        await store.clear()

        assert await store.get_events() == ([], 0)
