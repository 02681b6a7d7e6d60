"""Relay of human replies from the dashboard to the agent's automation."""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from support_desk.core.exceptions import DeliveryError, NotAuthorizedError, NotFoundError
from support_desk.core.observability import ConversationObserver, default_observer
from support_desk.core.telemetry import get_tracer
from support_desk.db.repositories import AgentRepository, ConversationRepository
from support_desk.models import Message, SenderType, User
from support_desk.services.agent_webhook_client import AgentWebhookClient
from support_desk.services.conversation_store import ConversationStore
from support_desk.services.handoff import HandoffStateMachine
from support_desk.services.realtime import RealtimeNotifier

tracer = get_tracer(__name__)


@dataclass
class RelayResult:
    message: Message
    webhook_status: int


class OutboundRelay:
    """Records a human reply, then delivers it to the agent's webhook.

    Delivery happens after the commit: a failed POST leaves the message in
    place and surfaces as ``DeliveryError``.
    """

    def __init__(
        self,
        db: AsyncSession,
        notifier: RealtimeNotifier | None = None,
        client: AgentWebhookClient | None = None,
        observer: ConversationObserver = default_observer,
    ):
        self.db = db
        self.notifier = notifier
        self.client = client or AgentWebhookClient()
        self.observer = observer
        self.agents = AgentRepository(db)
        self.conversations = ConversationRepository(db)
        self.store = ConversationStore(db, observer)

    async def send(
        self,
        user: User,
        conversation_id: UUID,
        agent_id: UUID,
        content: str,
    ) -> RelayResult:
        """Send ``content`` as ``user`` on a conversation of ``agent_id``.

        Raises:
            NotFoundError: Agent or conversation unknown to the user's organization
            NotAuthorizedError: The conversation is not under human control
            DeliveryError: The message was recorded but the webhook call failed
        """
        organization_id = user.organization_id
        agent = await self.agents.get_by_organization(organization_id, agent_id)
        if agent is None:
            raise NotFoundError("Agent", agent_id)

        conversation = await self.conversations.get_by_organization(
            organization_id, conversation_id
        )
        if conversation is None or conversation.agent_id != agent.id:
            raise NotFoundError("Conversation", conversation_id)

        if not HandoffStateMachine.can_send(conversation):
            raise NotAuthorizedError()

        message = await self.store.append_outbound(conversation, content, sender_name=user.name)
        if self.notifier:
            await self.notifier.new_message(organization_id, conversation.id, message)

        with tracer.start_as_current_span("outbound_relay.deliver") as span:
            span.set_attribute("agent.id", str(agent.id))
            span.set_attribute("message.id", str(message.id))
            result = await self.client.deliver(
                agent,
                {
                    "conversationId": str(conversation.id),
                    "clientPhone": conversation.client_phone,
                    "clientName": conversation.client_name,
                    "message": content,
                    "senderType": SenderType.HUMAN.value,
                },
            )
        if not result.ok:
            self.observer.delivery_failed(
                agent.id, conversation.id, message.id, result.error, result.status_code
            )
            raise DeliveryError(
                result.error or "Delivery to the agent webhook failed",
                message_id=message.id,
                webhook_status=result.status_code,
            )

        self.observer.delivery_succeeded(agent.id, conversation.id, message.id, result.status_code)
        return RelayResult(message=message, webhook_status=result.status_code)
