"""Unit tests for ConversationResolver."""

from uuid import uuid4

import pytest

from support_desk.core.exceptions import NotFoundError
from support_desk.models import Agent, ConversationStatus
from support_desk.services.resolver import ConversationResolver


class TestConversationResolver:
    """Tests for ConversationResolver."""

    @pytest.mark.asyncio
    async def test_unknown_phone_is_new(self, db_session, agent, observer):
        resolver = ConversationResolver(db_session, observer)

        decision = await resolver.resolve(agent.id, "+57 300-123 4567")

        assert decision.is_new
        assert decision.conversation_id is None
        assert decision.phone_key == "573001234567"
        assert observer.names() == ["conversation.resolved"]

    @pytest.mark.asyncio
    async def test_unknown_agent_raises_not_found(self, db_session):
        resolver = ConversationResolver(db_session)

        with pytest.raises(NotFoundError):
            await resolver.resolve(uuid4(), "573001234567")

    @pytest.mark.asyncio
    async def test_matches_syntactically_different_phone(
        self, db_session, agent, make_conversation
    ):
        existing = await make_conversation(agent, "=+57 300 123 4567")

        decision = await ConversationResolver(db_session).resolve(agent.id, "573001234567")

        assert not decision.is_new
        assert decision.conversation_id == existing.id
        assert not decision.attach_agent_link

    @pytest.mark.asyncio
    async def test_duplicates_pick_most_recent(
        self, db_session, agent, make_conversation, observer
    ):
        older = await make_conversation(agent, "573001234567", minutes_ago=30)
        newest = await make_conversation(agent, "+57 300 123 4567", minutes_ago=1)
        middle = await make_conversation(agent, "57-300-123-4567", minutes_ago=10)

        decision = await ConversationResolver(db_session, observer).resolve(
            agent.id, "573001234567"
        )

        assert decision.conversation_id == newest.id
        assert set(decision.duplicate_ids) == {older.id, middle.id}
        assert "conversation.duplicates" in observer.names()

    @pytest.mark.asyncio
    async def test_other_agent_conversation_is_not_reused(
        self, db_session, agent, second_agent, make_conversation
    ):
        await make_conversation(second_agent, "573001234567")

        decision = await ConversationResolver(db_session).resolve(agent.id, "573001234567")

        assert decision.is_new

    @pytest.mark.asyncio
    async def test_unlinked_conversation_is_adopted(
        self, db_session, organization, agent, make_conversation
    ):
        legacy = await make_conversation(None, "+57 300 123 4567", organization=organization)

        decision = await ConversationResolver(db_session).resolve(agent.id, "573001234567")

        assert not decision.is_new
        assert decision.conversation_id == legacy.id
        assert decision.attach_agent_link

    @pytest.mark.asyncio
    async def test_linked_match_preferred_over_unlinked(
        self, db_session, organization, agent, make_conversation
    ):
        await make_conversation(None, "573001234567", minutes_ago=0, organization=organization)
        linked = await make_conversation(agent, "573001234567", minutes_ago=60)

        decision = await ConversationResolver(db_session).resolve(agent.id, "573001234567")

        assert decision.conversation_id == linked.id
        assert not decision.attach_agent_link

    @pytest.mark.asyncio
    async def test_unlinked_conversation_of_another_organization_is_not_adopted(
        self, db_session, organization, other_organization, make_conversation
    ):
        await make_conversation(None, "+57 300 123 4567", organization=organization)
        foreign_agent = Agent(
            id=uuid4(),
            organization_id=other_organization.id,
            name="Other Bot",
            webhook_url="https://other.example.com/webhook",
            api_token="other-org-token-1",
        )
        db_session.add(foreign_agent)
        await db_session.commit()

        decision = await ConversationResolver(db_session).resolve(
            foreign_agent.id, "573001234567"
        )

        assert decision.is_new
        assert decision.conversation_id is None
        assert not decision.attach_agent_link
        assert decision.organization_id == other_organization.id

    @pytest.mark.asyncio
    async def test_unlinked_conversation_without_tenant_is_left_alone(
        self, db_session, agent, make_conversation
    ):
        await make_conversation(None, "573001234567")

        decision = await ConversationResolver(db_session).resolve(agent.id, "573001234567")

        assert decision.is_new

    @pytest.mark.asyncio
    async def test_archived_conversations_are_ignored(
        self, db_session, agent, make_conversation
    ):
        await make_conversation(agent, "573001234567", status=ConversationStatus.ARCHIVED)

        decision = await ConversationResolver(db_session).resolve(agent.id, "573001234567")

        assert decision.is_new

    @pytest.mark.asyncio
    async def test_resolution_writes_nothing(
        self, db_session, organization, agent, make_conversation
    ):
        legacy = await make_conversation(None, "573001234567", organization=organization)

        await ConversationResolver(db_session).resolve(agent.id, "573001234567")

        assert not db_session.dirty
        assert not db_session.new
        await db_session.refresh(legacy)
        assert legacy.agent_id is None
