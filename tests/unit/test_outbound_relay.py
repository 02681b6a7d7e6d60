"""Unit tests for OutboundRelay."""

import json
from uuid import uuid4

import httpx
import pytest

from support_desk.core.exceptions import DeliveryError, NotAuthorizedError, NotFoundError
from support_desk.db.repositories import MessageRepository
from support_desk.models import ConversationStatus, SenderType
from support_desk.services.agent_webhook_client import AgentWebhookClient
from support_desk.services.outbound import OutboundRelay


def client_returning(status: int, captured: list | None = None) -> AgentWebhookClient:
    def handler(request: httpx.Request) -> httpx.Response:
        if captured is not None:
            captured.append(request)
        return httpx.Response(status)

    return AgentWebhookClient(transport=httpx.MockTransport(handler))


class TestOutboundRelay:
    """Tests for OutboundRelay."""

    @pytest.fixture
    async def human_conversation(self, agent, user, make_conversation):
        return await make_conversation(
            agent,
            "+57 300-123 4567",
            status=ConversationStatus.HUMAN_ACTIVE,
            active_user=user,
            client_name="Maria",
        )

    @pytest.mark.asyncio
    async def test_records_then_delivers(
        self, db_session, agent, user, human_conversation, observer
    ):
        captured = []
        relay = OutboundRelay(db_session, client=client_returning(200, captured), observer=observer)

        result = await relay.send(user, human_conversation.id, agent.id, "On it!")

        assert result.webhook_status == 200
        assert result.message.sender_type == SenderType.HUMAN
        body = json.loads(captured[0].content)
        assert body == {
            "conversationId": str(human_conversation.id),
            "clientPhone": "+57 300-123 4567",
            "clientName": "Maria",
            "message": "On it!",
            "senderType": "HUMAN",
        }
        assert captured[0].headers["Authorization"] == f"Bearer {agent.api_token}"
        assert "relay.delivered" in observer.names()

    @pytest.mark.asyncio
    async def test_delivery_failure_keeps_message(
        self, db_session, agent, user, human_conversation, observer
    ):
        relay = OutboundRelay(db_session, client=client_returning(500), observer=observer)

        with pytest.raises(DeliveryError) as exc_info:
            await relay.send(user, human_conversation.id, agent.id, "On it!")

        error = exc_info.value
        assert error.status_code == 502
        assert error.webhook_status == 500
        messages = await MessageRepository(db_session).list_for_conversation(
            human_conversation.id
        )
        assert [m.content for m in messages] == ["On it!"]
        assert error.message_id == messages[0].id
        assert "relay.failed" in observer.names()

    @pytest.mark.asyncio
    async def test_requires_human_control(self, db_session, agent, user, make_conversation):
        conversation = await make_conversation(agent, "573001234567")
        captured = []
        relay = OutboundRelay(db_session, client=client_returning(200, captured))

        with pytest.raises(NotAuthorizedError):
            await relay.send(user, conversation.id, agent.id, "hello")

        assert captured == []
        assert await MessageRepository(db_session).count_for_conversation(conversation.id) == 0

    @pytest.mark.asyncio
    async def test_unknown_agent(self, db_session, user, human_conversation):
        with pytest.raises(NotFoundError):
            await OutboundRelay(db_session, client=client_returning(200)).send(
                user, human_conversation.id, uuid4(), "hello"
            )

    @pytest.mark.asyncio
    async def test_conversation_of_another_agent(
        self, db_session, second_agent, user, human_conversation
    ):
        with pytest.raises(NotFoundError):
            await OutboundRelay(db_session, client=client_returning(200)).send(
                user, human_conversation.id, second_agent.id, "hello"
            )
