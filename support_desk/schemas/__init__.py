"""Pydantic schemas for request/response models."""

from support_desk.schemas.agent import AgentCreate, AgentDetail, AgentList, AgentUpdate
from support_desk.schemas.audit_log import AuditLogDetail, AuditLogList
from support_desk.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserDetail
from support_desk.schemas.common import CamelModel, PaginatedResponse, PaginationParams
from support_desk.schemas.conversation import (
    ConversationDetail,
    ConversationList,
    ConversationMessageCreate,
    MessageDetail,
)
from support_desk.schemas.webhook import (
    InboundMessagePayload,
    InboundMessageResponse,
    OutboundMessageRequest,
    OutboundMessageResponse,
)

__all__ = [
    # Common
    "CamelModel",
    "PaginatedResponse",
    "PaginationParams",
    # Auth
    "LoginRequest",
    "RegisterRequest",
    "TokenResponse",
    "UserDetail",
    # Agent
    "AgentCreate",
    "AgentDetail",
    "AgentList",
    "AgentUpdate",
    # Conversation
    "ConversationDetail",
    "ConversationList",
    "ConversationMessageCreate",
    "MessageDetail",
    # Webhooks
    "InboundMessagePayload",
    "InboundMessageResponse",
    "OutboundMessageRequest",
    "OutboundMessageResponse",
    # Audit
    "AuditLogDetail",
    "AuditLogList",
]
