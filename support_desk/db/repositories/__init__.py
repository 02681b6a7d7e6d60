"""Repository classes for database operations."""

from support_desk.db.repositories.agent import AgentRepository
from support_desk.db.repositories.audit_log import AuditLogRepository
from support_desk.db.repositories.base import BaseRepository
from support_desk.db.repositories.conversation import ConversationRepository
from support_desk.db.repositories.message import MessageRepository
from support_desk.db.repositories.user import OrganizationRepository, UserRepository

__all__ = [
    "BaseRepository",
    "AgentRepository",
    "AuditLogRepository",
    "ConversationRepository",
    "MessageRepository",
    "OrganizationRepository",
    "UserRepository",
]
