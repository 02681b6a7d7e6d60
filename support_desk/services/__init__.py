"""Business logic services."""

from support_desk.services.agent_webhook_client import AgentWebhookClient, DeliveryResult
from support_desk.services.conversation_store import ConversationStore, InboundResult
from support_desk.services.handoff import HandoffStateMachine
from support_desk.services.inbound import InboundWebhookHandler
from support_desk.services.maintenance import ConversationMaintenance
from support_desk.services.outbound import OutboundRelay, RelayResult
from support_desk.services.realtime import ConnectionRegistry, RealtimeNotifier
from support_desk.services.resolver import ConversationResolver, ResolutionDecision
from support_desk.services.webhook_event_store import WebhookEventStore

__all__ = [
    "AgentWebhookClient",
    "ConnectionRegistry",
    "ConversationMaintenance",
    "ConversationResolver",
    "ConversationStore",
    "DeliveryResult",
    "HandoffStateMachine",
    "InboundResult",
    "InboundWebhookHandler",
    "OutboundRelay",
    "RealtimeNotifier",
    "RelayResult",
    "ResolutionDecision",
    "WebhookEventStore",
]
