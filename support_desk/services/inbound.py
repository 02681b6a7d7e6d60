"""Inbound webhook processing: messages posted by an agent's automation."""

import logging
from uuid import UUID

from redis.exceptions import RedisError
from sqlalchemy.ext.asyncio import AsyncSession

from support_desk.config import settings
from support_desk.core.exceptions import (
    AppError,
    BadRequestError,
    DuplicateConversationError,
    NotAuthorizedError,
    NotFoundError,
    UnauthorizedError,
)
from support_desk.core.observability import ConversationObserver, default_observer
from support_desk.core.phone import normalize_phone
from support_desk.core.security import tokens_match
from support_desk.core.telemetry import get_tracer
from support_desk.db.repositories import AgentRepository, ConversationRepository
from support_desk.models import Agent, ConversationStatus, SenderType
from support_desk.schemas import InboundMessagePayload, InboundMessageResponse
from support_desk.services.conversation_store import ConversationStore, InboundResult
from support_desk.services.realtime import RealtimeNotifier
from support_desk.services.resolver import ConversationResolver
from support_desk.services.webhook_event_store import WebhookEventStore

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

INBOUND_SENDERS = {SenderType.CLIENT.value, SenderType.AI.value}


class InboundWebhookHandler:
    """Authenticates, resolves and records one inbound message."""

    def __init__(
        self,
        db: AsyncSession,
        notifier: RealtimeNotifier | None = None,
        event_store: WebhookEventStore | None = None,
        observer: ConversationObserver = default_observer,
        ai_policy: str | None = None,
    ):
        self.db = db
        self.notifier = notifier
        self.event_store = event_store
        self.observer = observer
        self.ai_policy = ai_policy or settings.AI_WHILE_HUMAN_ACTIVE
        self.agents = AgentRepository(db)
        self.conversations = ConversationRepository(db)
        self.resolver = ConversationResolver(db, observer)
        self.store = ConversationStore(db, observer)

    async def handle(self, payload: InboundMessagePayload) -> InboundMessageResponse:
        """Process a payload, keeping the debug inbox entry in step with the outcome."""
        event_id = await self._record(payload)
        try:
            with tracer.start_as_current_span("inbound_webhook.process") as span:
                span.set_attribute("agent.id", payload.agent_id or "")
                response = await self._process(payload)
        except AppError as e:
            await self._set_status(event_id, "rejected", e.detail.get("message"))
            raise
        except Exception as e:
            await self._set_status(event_id, "failed", type(e).__name__)
            raise

        await self._set_status(
            event_id,
            "processed",
            conversationId=str(response.conversation_id),
            messageId=str(response.message_id),
        )
        return response

    async def _process(self, payload: InboundMessagePayload) -> InboundMessageResponse:
        phone_key = normalize_phone(payload.client_phone)
        content = (payload.message or "").strip()

        missing = [
            name
            for name, value in (
                ("agentId", payload.agent_id),
                ("apiToken", payload.api_token),
                ("clientPhone", phone_key),
                ("message", content),
            )
            if not value
        ]
        if missing:
            raise BadRequestError(
                f"Missing required fields: {', '.join(missing)}", required=missing
            )

        sender = (payload.sender_type or SenderType.CLIENT.value).upper()
        if sender not in INBOUND_SENDERS:
            raise BadRequestError("senderType must be CLIENT or AI")
        sender_type = SenderType(sender)

        agent = await self._authenticate(payload.agent_id, payload.api_token)

        client_phone = payload.client_phone.strip()
        client_name = (payload.client_name or "").strip() or None

        decision = await self.resolver.resolve_for_agent(agent, client_phone)
        if sender_type == SenderType.AI and not decision.is_new:
            await self._check_ai_policy(agent, decision.conversation_id)

        try:
            result = await self.store.append_inbound(
                decision, client_phone, client_name, content, sender_type
            )
        except DuplicateConversationError:
            # Lost a concurrent create; the winner's conversation is now visible
            await self.db.refresh(agent)
            logger.info(
                f"Concurrent create for agent {agent.id} and phone {phone_key}; re-resolving"
            )
            decision = await self.resolver.resolve_for_agent(agent, client_phone)
            result = await self.store.append_inbound(
                decision, client_phone, client_name, content, sender_type
            )

        await self._publish(agent, result)

        return InboundMessageResponse(
            conversation_id=result.conversation.id,
            message_id=result.message.id,
        )

    async def _authenticate(self, raw_agent_id: str, api_token: str) -> Agent:
        try:
            agent_id = UUID(raw_agent_id)
        except ValueError:
            raise NotFoundError("Agent", raw_agent_id)

        agent = await self.agents.get(agent_id)
        if agent is None:
            raise NotFoundError("Agent", agent_id)

        # An inactive agent gets the same answer as a wrong token
        if not agent.is_active or not tokens_match(api_token, agent.api_token):
            raise UnauthorizedError()
        return agent

    async def _check_ai_policy(self, agent: Agent, conversation_id: UUID) -> None:
        conversation = await self.conversations.get(conversation_id)
        if conversation is None or conversation.status != ConversationStatus.HUMAN_ACTIVE:
            return

        if self.ai_policy == "reject":
            raise NotAuthorizedError("Conversation is under human control")
        if self.ai_policy == "flag":
            self.observer.ai_message_during_human_control(
                agent.id, conversation_id, self.ai_policy
            )

    async def _publish(self, agent: Agent, result: InboundResult) -> None:
        if self.notifier is None:
            return
        await self.notifier.new_message(
            agent.organization_id, result.conversation.id, result.message
        )
        if result.is_new or result.agent_link_attached:
            await self.notifier.conversation_updated(agent.organization_id, result.conversation)

    async def _record(self, payload: InboundMessagePayload) -> str | None:
        if self.event_store is None:
            return None
        try:
            return await self.event_store.record(
                payload.agent_id, payload.model_dump(by_alias=True, exclude_none=True)
            )
        except RedisError as e:
            logger.warning(f"Webhook debug inbox unavailable: {e}")
            return None

    async def _set_status(self, event_id: str | None, status: str, error: str | None = None, **fields) -> None:
        if self.event_store is None or event_id is None:
            return
        try:
            await self.event_store.update_status(event_id, status, error, **fields)
        except RedisError as e:
            logger.warning(f"Webhook debug inbox unavailable: {e}")
