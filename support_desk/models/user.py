"""User model for dashboard operators."""

from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import Enum as SQLEnum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from support_desk.db.base import Base
from support_desk.models.base import CreatedAtMixin


class UserRole(str, Enum):
    """Role a user has within their organization."""

    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    AGENT = "AGENT"


class User(Base, CreatedAtMixin):
    """A human who monitors conversations and can take control of them."""

    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole, name="user_role"), default=UserRole.AGENT, nullable=False
    )
    organization_id: Mapped[UUID | None] = mapped_column(ForeignKey("organizations.id"))

    # Relationships
    organization: Mapped["Organization | None"] = relationship(  # noqa: F821
        back_populates="users"
    )
