"""Fixtures driving the FastAPI app in-process."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from support_desk.api.deps import get_db
from support_desk.api.v1.webhooks import get_event_store
from support_desk.core.jwt import create_access_token
from support_desk.main import create_app


@pytest.fixture
def app(session_maker):
    app = create_app()

    async def override_get_db() -> AsyncGenerator:
        async with session_maker() as session:
            yield session

    async def no_event_store():
        return None

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_event_store] = no_event_store
    return app


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def auth_headers(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}
