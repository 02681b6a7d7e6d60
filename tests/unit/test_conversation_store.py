"""Unit tests for ConversationStore."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select

from support_desk.core.exceptions import (
    DuplicateConversationError,
    NotAuthorizedError,
    PartialWriteError,
)
from support_desk.models import Conversation, ConversationStatus, Message, SenderType
from support_desk.services.conversation_store import ConversationStore
from support_desk.services.resolver import ConversationResolver, ResolutionDecision


async def _count(session, model) -> int:
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar()


class TestAppendInbound:
    """Tests for ConversationStore.append_inbound."""

    @pytest.mark.asyncio
    async def test_new_conversation(self, db_session, agent):
        decision = await ConversationResolver(db_session).resolve(agent.id, "+57 300-123 4567")

        result = await ConversationStore(db_session).append_inbound(
            decision, "+57 300-123 4567", "Maria", "hi"
        )

        assert result.is_new
        assert result.conversation.status == ConversationStatus.AI_ACTIVE
        assert result.conversation.agent_id == agent.id
        assert result.conversation.client_phone == "+57 300-123 4567"
        assert result.conversation.client_phone_key == "573001234567"
        assert result.message.conversation_id == result.conversation.id
        assert result.message.sender_type == SenderType.CLIENT
        assert await _count(db_session, Conversation) == 1
        assert await _count(db_session, Message) == 1

    @pytest.mark.asyncio
    async def test_new_conversation_defaults_name_to_phone(self, db_session, agent):
        decision = await ConversationResolver(db_session).resolve(agent.id, "573001234567")

        result = await ConversationStore(db_session).append_inbound(
            decision, "573001234567", None, "hi"
        )

        assert result.conversation.client_name == "573001234567"

    @pytest.mark.asyncio
    async def test_existing_conversation_updates_timestamp(
        self, db_session, agent, make_conversation
    ):
        existing = await make_conversation(agent, "573001234567", minutes_ago=60)
        before = existing.last_message_at
        decision = await ConversationResolver(db_session).resolve(agent.id, "573001234567")

        result = await ConversationStore(db_session).append_inbound(
            decision, "573001234567", None, "hello again"
        )

        assert not result.is_new
        assert result.conversation.id == existing.id
        await db_session.refresh(existing)
        assert existing.last_message_at.replace(tzinfo=None) > before.replace(tzinfo=None)
        assert existing.client_phone_key == "573001234567"

    @pytest.mark.asyncio
    async def test_existing_conversation_fills_placeholder_name(
        self, db_session, agent, make_conversation
    ):
        existing = await make_conversation(agent, "573001234567", client_name="573001234567")
        decision = await ConversationResolver(db_session).resolve(agent.id, "573001234567")

        await ConversationStore(db_session).append_inbound(
            decision, "573001234567", "Maria", "hi"
        )

        await db_session.refresh(existing)
        assert existing.client_name == "Maria"

    @pytest.mark.asyncio
    async def test_existing_name_is_kept(self, db_session, agent, make_conversation):
        existing = await make_conversation(agent, "573001234567", client_name="Maria Lopez")
        decision = await ConversationResolver(db_session).resolve(agent.id, "573001234567")

        await ConversationStore(db_session).append_inbound(
            decision, "573001234567", "maria", "hi"
        )

        await db_session.refresh(existing)
        assert existing.client_name == "Maria Lopez"

    @pytest.mark.asyncio
    async def test_attaches_missing_agent_link(
        self, db_session, organization, agent, make_conversation, observer
    ):
        legacy = await make_conversation(None, "+57 300 123 4567", organization=organization)
        decision = await ConversationResolver(db_session).resolve(agent.id, "573001234567")

        result = await ConversationStore(db_session, observer).append_inbound(
            decision, "573001234567", None, "hi"
        )

        assert result.agent_link_attached
        await db_session.refresh(legacy)
        assert legacy.agent_id == agent.id
        assert "conversation.agent_link_repaired" in observer.names()

    @pytest.mark.asyncio
    async def test_failure_after_conversation_created_leaves_nothing(
        self, db_session, agent, observer
    ):
        resolver = ConversationResolver(db_session)
        store = ConversationStore(db_session, observer)
        store.messages.add = AsyncMock(side_effect=RuntimeError("simulated failure"))
        decision = await resolver.resolve(agent.id, "573001234567")

        with pytest.raises(PartialWriteError) as exc_info:
            await store.append_inbound(decision, "573001234567", None, "hi")

        assert exc_info.value.steps_applied == ["create_conversation"]
        assert "store.partial_write" in observer.names()
        assert await _count(db_session, Conversation) == 0
        assert await _count(db_session, Message) == 0

        await db_session.refresh(agent)
        retry = await resolver.resolve(agent.id, "573001234567")
        assert retry.is_new

    @pytest.mark.asyncio
    async def test_failure_on_existing_conversation_rolls_back_update(
        self, db_session, agent, make_conversation
    ):
        existing = await make_conversation(agent, "573001234567", minutes_ago=60)
        before = existing.last_message_at.replace(tzinfo=None)
        store = ConversationStore(db_session)
        store.messages.add = AsyncMock(side_effect=RuntimeError("simulated failure"))
        decision = await ConversationResolver(db_session).resolve(agent.id, "573001234567")

        with pytest.raises(PartialWriteError) as exc_info:
            await store.append_inbound(decision, "573001234567", None, "hi")

        assert exc_info.value.steps_applied == ["update_conversation"]
        await db_session.refresh(existing)
        assert existing.last_message_at.replace(tzinfo=None) == before
        assert existing.client_phone_key is None

    @pytest.mark.asyncio
    async def test_concurrent_create_raises_duplicate(self, db_session, agent):
        store = ConversationStore(db_session)
        decision = ResolutionDecision(
            agent_id=agent.id,
            organization_id=agent.organization_id,
            phone_key="573001234567",
            conversation_id=None,
            is_new=True,
        )
        await store.append_inbound(decision, "573001234567", None, "first")

        with pytest.raises(DuplicateConversationError):
            await store.append_inbound(decision, "+57 300 123 4567", None, "second")

        assert await _count(db_session, Conversation) == 1


class TestAppendOutbound:
    """Tests for ConversationStore.append_outbound."""

    @pytest.mark.asyncio
    async def test_requires_human_control(self, db_session, agent, make_conversation):
        conversation = await make_conversation(agent, "573001234567")

        with pytest.raises(NotAuthorizedError):
            await ConversationStore(db_session).append_outbound(conversation, "hello")

        assert await _count(db_session, Message) == 0

    @pytest.mark.asyncio
    async def test_records_human_message(self, db_session, agent, user, make_conversation):
        conversation = await make_conversation(
            agent,
            "573001234567",
            minutes_ago=60,
            status=ConversationStatus.HUMAN_ACTIVE,
            active_user=user,
        )
        before = conversation.last_message_at.replace(tzinfo=None)

        message = await ConversationStore(db_session).append_outbound(
            conversation, "hello", sender_name=user.name
        )

        assert message.sender_type == SenderType.HUMAN
        assert message.sender_name == "Ana Operator"
        await db_session.refresh(conversation)
        assert conversation.last_message_at.replace(tzinfo=None) > before
