"""Agent schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from support_desk.models import WebhookAuth
from support_desk.schemas.common import CamelModel


class AgentCreate(CamelModel):
    """Schema for creating a new agent."""

    name: str = Field(..., min_length=1, max_length=100)
    webhook_url: str = Field(..., min_length=1, description="Where human replies are relayed")
    api_token: str | None = Field(
        None,
        min_length=8,
        max_length=255,
        description="Shared secret; generated when omitted",
    )
    webhook_auth: WebhookAuth = Field(
        default=WebhookAuth.BEARER,
        description="'bearer': Authorization header. 'body': apiToken field in the JSON body.",
    )


class AgentUpdate(CamelModel):
    """Schema for updating an agent."""

    name: str | None = Field(None, min_length=1, max_length=100)
    webhook_url: str | None = Field(None, min_length=1)
    api_token: str | None = Field(None, min_length=8, max_length=255)
    webhook_auth: WebhookAuth | None = None
    is_active: bool | None = None


class AgentDetail(CamelModel):
    """Schema for agent details."""

    id: UUID
    organization_id: UUID
    name: str
    webhook_url: str
    api_token: str
    webhook_auth: WebhookAuth
    is_active: bool
    created_at: datetime


class AgentList(CamelModel):
    """Schema for paginated agent list."""

    items: list[AgentDetail]
    total: int
    skip: int
    limit: int
