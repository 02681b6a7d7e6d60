"""Conversation identity resolution.

Decides which conversation an inbound (agent, phone) pair belongs to without
writing anything, so the caller can apply the decision in one transaction.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from support_desk.core.exceptions import NotFoundError
from support_desk.core.observability import ConversationObserver, default_observer
from support_desk.core.phone import normalize_phone
from support_desk.db.repositories import AgentRepository, ConversationRepository
from support_desk.models import Agent, Conversation, ConversationStatus


@dataclass(frozen=True)
class ResolutionDecision:
    """Outcome of resolving an (agent, phone) pair.

    ``conversation_id`` is None when ``is_new`` is set; the store mints the id.
    ``attach_agent_link`` marks a legacy conversation that matched by phone but
    has no agent link yet.
    """

    agent_id: UUID
    organization_id: UUID
    phone_key: str
    conversation_id: UUID | None
    is_new: bool
    attach_agent_link: bool = False
    duplicate_ids: tuple[UUID, ...] = field(default_factory=tuple)


def recency_key(conversation: Conversation) -> tuple[datetime, datetime]:
    # SQLite hands back naive datetimes; compare everything as aware UTC
    def aware(value: datetime | None) -> datetime:
        if value is None:
            return datetime.min.replace(tzinfo=timezone.utc)
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    return aware(conversation.last_message_at), aware(conversation.created_at)


class ConversationResolver:
    """Maps an agent and a raw client phone onto a conversation."""

    def __init__(
        self,
        db: AsyncSession,
        observer: ConversationObserver = default_observer,
    ):
        self.db = db
        self.observer = observer
        self.agents = AgentRepository(db)
        self.conversations = ConversationRepository(db)

    async def resolve(self, agent_id: UUID, raw_phone: str | None) -> ResolutionDecision:
        """Resolve the conversation for ``raw_phone`` under ``agent_id``.

        Raises:
            NotFoundError: If the agent does not exist
        """
        agent = await self.agents.get(agent_id)
        if agent is None:
            raise NotFoundError("Agent", str(agent_id))
        return await self.resolve_for_agent(agent, raw_phone)

    async def resolve_for_agent(
        self, agent: Agent, raw_phone: str | None
    ) -> ResolutionDecision:
        """Resolve against an agent the caller already loaded."""
        key = normalize_phone(raw_phone)

        candidates = [
            conversation
            for conversation in await self.conversations.list_resolution_candidates(
                agent.organization_id
            )
            if conversation.status != ConversationStatus.ARCHIVED
            and normalize_phone(conversation.client_phone) == key
        ]

        primary = sorted(
            (c for c in candidates if c.agent_id == agent.id), key=recency_key, reverse=True
        )
        if primary:
            kept, duplicates = primary[0], tuple(c.id for c in primary[1:])
            if duplicates:
                self.observer.duplicates_detected(agent.id, key, kept.id, duplicates)
            decision = ResolutionDecision(
                agent_id=agent.id,
                organization_id=agent.organization_id,
                phone_key=key,
                conversation_id=kept.id,
                is_new=False,
                duplicate_ids=duplicates,
            )
        else:
            # Conversations recorded before agents were linked
            unlinked = sorted(
                (c for c in candidates if c.agent_id is None), key=recency_key, reverse=True
            )
            if unlinked:
                decision = ResolutionDecision(
                    agent_id=agent.id,
                    organization_id=agent.organization_id,
                    phone_key=key,
                    conversation_id=unlinked[0].id,
                    is_new=False,
                    attach_agent_link=True,
                    duplicate_ids=tuple(c.id for c in unlinked[1:]),
                )
            else:
                decision = ResolutionDecision(
                    agent_id=agent.id,
                    organization_id=agent.organization_id,
                    phone_key=key,
                    conversation_id=None,
                    is_new=True,
                )

        self.observer.conversation_resolved(
            agent.id,
            key,
            decision.conversation_id,
            decision.is_new,
            decision.attach_agent_link,
        )
        return decision
