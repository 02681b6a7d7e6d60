"""User and organization repositories."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from support_desk.db.repositories.base import BaseRepository
from support_desk.models import Organization, User


class UserRepository(BaseRepository[User]):
    """Repository for dashboard users."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> User | None:
        """Get a user by email, case-insensitively."""
        stmt = select(User).where(func.lower(User.email) == email.lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()


class OrganizationRepository(BaseRepository[Organization]):
    """Repository for organizations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Organization)
