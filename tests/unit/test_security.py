"""Unit tests for password, agent token and session token helpers."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
import pytest

from support_desk.config import settings
from support_desk.core.jwt import JWTValidationError, create_access_token, decode_access_token
from support_desk.core.security import (
    generate_agent_token,
    hash_password,
    tokens_match,
    verify_password,
)


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = hash_password("s3cret-pass")

        assert hashed != "s3cret-pass"
        assert verify_password("s3cret-pass", hashed)
        assert not verify_password("wrong-pass", hashed)

    def test_malformed_hash_does_not_verify(self):
        assert not verify_password("anything", "not-a-bcrypt-hash")


class TestAgentTokens:
    def test_generated_tokens_are_unique(self):
        assert generate_agent_token() != generate_agent_token()

    def test_tokens_match_exactly(self):
        assert tokens_match("abc123", "abc123")
        assert not tokens_match("abc123", "ABC123")
        assert not tokens_match("abc123 ", "abc123")
        assert not tokens_match("", "abc123")


class TestSessionTokens:
    def test_round_trip(self):
        user_id = uuid4()

        claims = decode_access_token(create_access_token(user_id))

        assert claims.user_id == user_id
        assert claims.expires_at > datetime.now(timezone.utc)

    def test_expired_token_rejected(self):
        token = jwt.encode(
            {"sub": str(uuid4()), "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )

        with pytest.raises(JWTValidationError, match="expired"):
            decode_access_token(token)

    def test_wrong_signature_rejected(self):
        token = jwt.encode(
            {"sub": str(uuid4()), "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
            "another-secret-that-is-long-enough-for-hs256",
            algorithm="HS256",
        )

        with pytest.raises(JWTValidationError):
            decode_access_token(token)

    def test_non_uuid_subject_rejected(self):
        token = jwt.encode(
            {"sub": "not-a-uuid", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )

        with pytest.raises(JWTValidationError, match="user id"):
            decode_access_token(token)
