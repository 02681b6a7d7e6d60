"""Agent model: one automated WhatsApp integration."""

from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import Boolean, Enum as SQLEnum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from support_desk.db.base import Base
from support_desk.models.base import CreatedAtMixin


class WebhookAuth(str, Enum):
    """How the agent's webhook expects the shared token on relayed messages."""

    BEARER = "bearer"  # Authorization: Bearer <api_token>
    BODY = "body"  # {"apiToken": <api_token>, ...}


class Agent(Base, CreatedAtMixin):
    """Represents an external automation posting into and receiving from the dashboard."""

    __tablename__ = "agents"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    organization_id: Mapped[UUID] = mapped_column(
        ForeignKey("organizations.id"), nullable=False, index=True
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    webhook_url: Mapped[str] = mapped_column(Text, nullable=False)

    # Compared verbatim on every inbound call, so stored as issued
    api_token: Mapped[str] = mapped_column(String(255), nullable=False)
    webhook_auth: Mapped[WebhookAuth] = mapped_column(
        SQLEnum(WebhookAuth, name="webhook_auth"), default=WebhookAuth.BEARER, nullable=False
    )

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Relationships
    organization: Mapped["Organization"] = relationship(back_populates="agents")  # noqa: F821
    conversations: Mapped[list["Conversation"]] = relationship(  # noqa: F821
        back_populates="agent"
    )
