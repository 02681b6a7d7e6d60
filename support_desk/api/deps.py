"""Common API dependencies."""

from collections.abc import AsyncGenerator
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from support_desk.config import settings
from support_desk.core.exceptions import ForbiddenError, UnauthorizedError
from support_desk.core.jwt import JWTValidationError, decode_access_token
from support_desk.db.repositories import UserRepository
from support_desk.db.session import async_session_maker
from support_desk.models import User
from support_desk.services.realtime import RealtimeNotifier

# auto_error=False so a missing header yields our 401 body instead of FastAPI's 403
optional_bearer = HTTPBearer(auto_error=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database sessions."""
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.close()


async def get_redis() -> AsyncGenerator[Redis, None]:
    """Dependency for getting async Redis client."""
    redis = Redis.from_url(settings.REDIS_URL, decode_responses=True)
    try:
        yield redis
    finally:
        await redis.aclose()


def get_notifier(request: Request) -> RealtimeNotifier:
    """The application's realtime notifier."""
    return request.app.state.notifier


async def authenticate_token(db: AsyncSession, token: str) -> User:
    """Resolve a session token to its user.

    Shared by the HTTP dependency and the WebSocket handshake.

    Raises:
        UnauthorizedError: If the token is invalid or its user is gone
    """
    try:
        claims = decode_access_token(token)
    except JWTValidationError as e:
        raise UnauthorizedError(str(e))

    user = await UserRepository(db).get(claims.user_id)
    if user is None:
        raise UnauthorizedError("User no longer exists")
    return user


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(optional_bearer)],
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Dependency for getting current user from JWT token.

    Args:
        credentials: HTTP Bearer credentials
        db: Database session

    Returns:
        The authenticated User

    Raises:
        UnauthorizedError: If token is missing or invalid
    """
    if not credentials:
        raise UnauthorizedError("Missing authorization header")

    return await authenticate_token(db, credentials.credentials)


def require_organization(user: User) -> UUID:
    """The organization the user acts for."""
    if user.organization_id is None:
        raise ForbiddenError("User does not belong to an organization")
    return user.organization_id


# Type aliases for cleaner annotations
DbSession = Annotated[AsyncSession, Depends(get_db)]
RedisClient = Annotated[Redis, Depends(get_redis)]
CurrentUser = Annotated[User, Depends(get_current_user)]
Notifier = Annotated[RealtimeNotifier, Depends(get_notifier)]
