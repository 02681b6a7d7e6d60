"""Append-only audit trail of handoffs and agent management."""

from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import Enum as SQLEnum, ForeignKey, Index, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from support_desk.db.base import Base
from support_desk.models.base import CreatedAtMixin


class AuditAction(str, Enum):
    """Kinds of audited operations."""

    TAKE_CONTROL = "TAKE_CONTROL"
    RETURN_TO_AI = "RETURN_TO_AI"
    CREATE_AGENT = "CREATE_AGENT"
    DELETE_AGENT = "DELETE_AGENT"
    UPDATE_AGENT = "UPDATE_AGENT"


class AuditLog(Base, CreatedAtMixin):
    """One audited action. Never updated or deleted."""

    __tablename__ = "audit_logs"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    conversation_id: Mapped[UUID | None] = mapped_column(ForeignKey("conversations.id"))
    agent_id: Mapped[UUID | None] = mapped_column(ForeignKey("agents.id"))

    action: Mapped[AuditAction] = mapped_column(
        SQLEnum(AuditAction, name="audit_action"), nullable=False
    )
    details: Mapped[str | None] = mapped_column(Text)

    # Relationships
    user: Mapped["User"] = relationship()  # noqa: F821

    __table_args__ = (Index("ix_audit_logs_created_at", "created_at"),)
