"""Conversation model: one client phone thread under one agent."""

from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Enum as SQLEnum, ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from support_desk.db.base import Base
from support_desk.models.base import CreatedAtMixin, utcnow


class ConversationStatus(str, Enum):
    """Who currently answers the client."""

    AI_ACTIVE = "AI_ACTIVE"
    HUMAN_ACTIVE = "HUMAN_ACTIVE"
    ARCHIVED = "ARCHIVED"


class Conversation(Base, CreatedAtMixin):
    """Represents a conversation thread with a client phone number."""

    __tablename__ = "conversations"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)

    # NULL only on legacy rows written before conversations were linked to agents
    agent_id: Mapped[UUID | None] = mapped_column(ForeignKey("agents.id"))
    # Tenant of the conversation; lets legacy rows without an agent stay scoped
    organization_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("organizations.id"), index=True
    )

    client_phone: Mapped[str] = mapped_column(String(50), nullable=False)
    # normalize_phone(client_phone); NULL on legacy rows until repaired
    client_phone_key: Mapped[str | None] = mapped_column(String(32))
    client_name: Mapped[str | None] = mapped_column(String(255))

    status: Mapped[ConversationStatus] = mapped_column(
        SQLEnum(ConversationStatus, name="conversation_status"),
        default=ConversationStatus.AI_ACTIVE,
        nullable=False,
    )
    active_user_id: Mapped[UUID | None] = mapped_column(ForeignKey("users.id"))
    last_message_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    # Relationships
    agent: Mapped["Agent | None"] = relationship(back_populates="conversations")  # noqa: F821
    active_user: Mapped["User | None"] = relationship()  # noqa: F821
    messages: Mapped[list["Message"]] = relationship(  # noqa: F821
        back_populates="conversation", order_by="Message.created_at"
    )

    __table_args__ = (
        # At most one open conversation per (agent, normalized phone)
        Index(
            "uq_conversations_agent_phone_key",
            "agent_id",
            "client_phone_key",
            unique=True,
            postgresql_where=text("status != 'ARCHIVED'"),
            sqlite_where=text("status != 'ARCHIVED'"),
        ),
        Index("ix_conversations_last_message_at", "last_message_at"),
        Index("ix_conversations_status", "status"),
    )
