"""Dashboard session tokens (HS256 JWT)."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt

from support_desk.config import settings

logger = logging.getLogger(__name__)


@dataclass
class TokenClaims:
    """Claims extracted from a dashboard session token."""

    user_id: UUID
    expires_at: datetime


class JWTValidationError(Exception):
    """Raised when token validation fails."""

    pass


def create_access_token(user_id: UUID, expires_minutes: int | None = None) -> str:
    """
    Issue a signed session token for a dashboard user.

    Args:
        user_id: The user the token identifies
        expires_minutes: Lifetime override, defaults to JWT_EXPIRES_MINUTES

    Returns:
        The encoded JWT
    """
    now = datetime.now(timezone.utc)
    lifetime = timedelta(minutes=expires_minutes or settings.JWT_EXPIRES_MINUTES)
    claims = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + lifetime,
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> TokenClaims:
    """
    Validate a session token and return its claims.

    Args:
        token: The JWT to validate

    Returns:
        TokenClaims with the user id and expiry

    Raises:
        JWTValidationError: If the token is invalid or expired
    """
    try:
        claims = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        logger.debug("Token has expired")
        raise JWTValidationError("Token has expired")
    except jwt.PyJWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise JWTValidationError(f"Token validation failed: {e}") from e

    try:
        user_id = UUID(claims["sub"])
    except ValueError as e:
        raise JWTValidationError("Token subject is not a user id") from e

    return TokenClaims(
        user_id=user_id,
        expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
    )
