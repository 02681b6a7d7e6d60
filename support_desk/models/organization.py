"""Organization model: the tenant boundary."""

from uuid import UUID, uuid4

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from support_desk.db.base import Base
from support_desk.models.base import CreatedAtMixin


class Organization(Base, CreatedAtMixin):
    """A tenant owning users and agents."""

    __tablename__ = "organizations"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Relationships
    users: Mapped[list["User"]] = relationship(back_populates="organization")  # noqa: F821
    agents: Mapped[list["Agent"]] = relationship(back_populates="organization")  # noqa: F821
