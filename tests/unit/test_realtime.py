"""Unit tests for the realtime connection registry."""

from uuid import uuid4

import pytest

from support_desk.services.realtime import ConnectionRegistry
from tests.conftest import FakeWebSocket


class TestConnectionRegistry:
    """Tests for ConnectionRegistry."""

    @pytest.mark.asyncio
    async def test_broadcast_is_scoped_to_organization(self):
        registry = ConnectionRegistry()
        org_a, org_b = uuid4(), uuid4()
        a1, a2, b1 = FakeWebSocket(), FakeWebSocket(), FakeWebSocket()
        registry.add(a1, org_a, uuid4())
        registry.add(a2, org_a, uuid4())
        registry.add(b1, org_b, uuid4())

        delivered = await registry.broadcast(org_a, {"type": "new_message"})

        assert delivered == 2
        assert a1.sent == a2.sent == [{"type": "new_message"}]
        assert b1.sent == []

    @pytest.mark.asyncio
    async def test_failed_socket_is_dropped(self):
        registry = ConnectionRegistry()
        org = uuid4()
        healthy, broken = FakeWebSocket(), FakeWebSocket(fail=True)
        registry.add(healthy, org, uuid4())
        registry.add(broken, org, uuid4())

        delivered = await registry.broadcast(org, {"type": "conversation_updated"})

        assert delivered == 1
        assert registry.connection_count(org) == 1

    def test_remove(self):
        registry = ConnectionRegistry()
        org = uuid4()
        socket = FakeWebSocket()
        registry.add(socket, org, uuid4())

        registry.remove(socket)
        registry.remove(socket)

        assert registry.connection_count(org) == 0
        assert registry.connection_count() == 0

    @pytest.mark.asyncio
    async def test_broadcast_without_listeners(self):
        assert await ConnectionRegistry().broadcast(uuid4(), {"type": "new_message"}) == 0
