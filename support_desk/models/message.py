"""Message model: immutable conversation content."""

from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import Enum as SQLEnum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from support_desk.db.base import Base
from support_desk.models.base import CreatedAtMixin


class SenderType(str, Enum):
    """Who wrote a message."""

    AI = "AI"
    HUMAN = "HUMAN"
    CLIENT = "CLIENT"


class Message(Base, CreatedAtMixin):
    """Represents one message in a conversation."""

    __tablename__ = "messages"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    conversation_id: Mapped[UUID] = mapped_column(
        ForeignKey("conversations.id"), nullable=False
    )

    sender_type: Mapped[SenderType] = mapped_column(
        SQLEnum(SenderType, name="sender_type"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    sender_name: Mapped[str | None] = mapped_column(String(255))

    # Relationships
    conversation: Mapped["Conversation"] = relationship(  # noqa: F821
        back_populates="messages"
    )

    __table_args__ = (
        Index("ix_messages_conversation_created", "conversation_id", "created_at"),
    )
