"""Conversation and message schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from support_desk.models import ConversationStatus, SenderType
from support_desk.schemas.common import CamelModel


class ConversationDetail(CamelModel):
    """Schema for conversation details."""

    id: UUID
    agent_id: UUID | None
    client_phone: str
    client_name: str | None
    status: ConversationStatus
    active_user_id: UUID | None
    last_message_at: datetime
    created_at: datetime


class ConversationList(CamelModel):
    """Schema for paginated conversation list."""

    items: list[ConversationDetail]
    total: int
    skip: int
    limit: int


class MessageDetail(CamelModel):
    """Schema for message details."""

    id: UUID
    conversation_id: UUID
    sender_type: SenderType
    content: str
    sender_name: str | None
    created_at: datetime


class ConversationMessageCreate(CamelModel):
    """Schema for a human reply posted from a conversation view."""

    message: str = Field(..., min_length=1)
