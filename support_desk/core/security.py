"""Security utilities for passwords and agent tokens."""

import hmac
import secrets

import bcrypt

from support_desk.config import settings


def generate_agent_token() -> str:
    """Generate a new shared secret for an agent."""
    return secrets.token_urlsafe(settings.AGENT_TOKEN_BYTES)


def tokens_match(provided: str, stored: str) -> bool:
    """Compare an inbound token against the agent's stored token byte for byte."""
    return hmac.compare_digest(provided.encode(), stored.encode())


def hash_password(password: str) -> str:
    """Hash a dashboard password using bcrypt."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against its bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode(), hashed.encode())
    except ValueError:
        # Malformed hash in storage
        return False
