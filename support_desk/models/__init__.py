"""SQLAlchemy models."""

from support_desk.models.agent import Agent, WebhookAuth
from support_desk.models.audit_log import AuditAction, AuditLog
from support_desk.models.conversation import Conversation, ConversationStatus
from support_desk.models.message import Message, SenderType
from support_desk.models.organization import Organization
from support_desk.models.user import User, UserRole

__all__ = [
    "Agent",
    "AuditAction",
    "AuditLog",
    "Conversation",
    "ConversationStatus",
    "Message",
    "Organization",
    "SenderType",
    "User",
    "UserRole",
    "WebhookAuth",
]
