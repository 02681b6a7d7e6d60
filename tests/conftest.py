"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from support_desk.core.observability import ConversationObserver
from support_desk.core.security import hash_password
from support_desk.db.base import Base
from support_desk.models import (
    Agent,
    Conversation,
    ConversationStatus,
    Organization,
    User,
    UserRole,
    WebhookAuth,
)


# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

AGENT_TOKEN = "agent-secret-token-1"
USER_PASSWORD = "correct-horse-battery"


class RecordingObserver(ConversationObserver):
    """Observer that keeps every event instead of logging it."""

    def __init__(self):
        self.events: list[tuple[str, dict[str, Any]]] = []

    def _emit(self, level: int, event: str, message: str, **fields) -> None:
        self.events.append((event, fields))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]


class FakeWebSocket:
    """Collects JSON frames sent by the connection registry."""

    def __init__(self, fail: bool = False):
        self.sent: list[dict] = []
        self.fail = fail

    async def send_json(self, data: Any) -> None:
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(data)


@pytest.fixture
async def async_engine():
    """Create async engine for testing."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_maker(async_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine, configured like production."""
    return async_sessionmaker(
        async_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create async database session for testing."""
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
async def organization(db_session: AsyncSession) -> Organization:
    org = Organization(id=uuid4(), name="Acme Support")
    db_session.add(org)
    await db_session.commit()
    return org


@pytest.fixture
async def other_organization(db_session: AsyncSession) -> Organization:
    org = Organization(id=uuid4(), name="Other Corp")
    db_session.add(org)
    await db_session.commit()
    return org


@pytest.fixture
async def user(db_session: AsyncSession, organization: Organization) -> User:
    """An administrator of ``organization``."""
    user = User(
        id=uuid4(),
        name="Ana Operator",
        email="ana@example.com",
        password_hash=hash_password(USER_PASSWORD),
        role=UserRole.ADMIN,
        organization_id=organization.id,
    )
    db_session.add(user)
    await db_session.commit()
    return user


@pytest.fixture
async def agent(db_session: AsyncSession, organization: Organization) -> Agent:
    agent = Agent(
        id=uuid4(),
        organization_id=organization.id,
        name="Sales Bot",
        webhook_url="https://automation.example.com/webhook/reply",
        api_token=AGENT_TOKEN,
        webhook_auth=WebhookAuth.BEARER,
        is_active=True,
    )
    db_session.add(agent)
    await db_session.commit()
    return agent


@pytest.fixture
async def second_agent(db_session: AsyncSession, organization: Organization) -> Agent:
    agent = Agent(
        id=uuid4(),
        organization_id=organization.id,
        name="Billing Bot",
        webhook_url="https://automation.example.com/webhook/billing",
        api_token="agent-secret-token-2",
        webhook_auth=WebhookAuth.BODY,
        is_active=True,
    )
    db_session.add(agent)
    await db_session.commit()
    return agent


@pytest.fixture
def make_conversation(db_session: AsyncSession):
    """Insert a conversation directly, bypassing the store.

    ``minutes_ago`` sets last_message_at relative to now. The tenant comes
    from ``organization`` or else from the agent.
    """

    async def _make(
        agent: Agent | None,
        phone: str,
        *,
        minutes_ago: int = 0,
        status: ConversationStatus = ConversationStatus.AI_ACTIVE,
        phone_key: str | None = None,
        active_user: User | None = None,
        client_name: str | None = None,
        organization: Organization | None = None,
    ) -> Conversation:
        if organization is not None:
            organization_id = organization.id
        else:
            organization_id = agent.organization_id if agent else None
        conversation = Conversation(
            id=uuid4(),
            agent_id=agent.id if agent else None,
            organization_id=organization_id,
            client_phone=phone,
            client_phone_key=phone_key,
            client_name=client_name,
            status=status,
            active_user_id=active_user.id if active_user else None,
            last_message_at=datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
        )
        db_session.add(conversation)
        await db_session.commit()
        return conversation

    return _make
