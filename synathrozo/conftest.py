from uuid import UUID

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from synathrozo.config.database import create_session_maker
from synathrozo.dependencies import (
    get_delivery_client,
    get_dispatcher,
    get_event_store,
    get_invitation_store,
)
from synathrozo.dispatch.dispatcher import NotificationDispatcher
from synathrozo.events.store import SqlEventStore
from synathrozo.invitations.store import SqlInvitationStore
from synathrozo.invitations.tests.inmemory_models import (
    OWNER_ID,
    DispatchConfig,
    InMemoryDeliveryClient,
    RecordingSleep,
)
from synathrozo.main import app
from synathrozo.models.base import BaseModel
from synathrozo.repository import orm_models  # noqa: F401

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def session_maker():
    """Fresh in-memory database per test."""
    engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    yield create_session_maker(engine)

    await engine.dispose()


@pytest.fixture
def event_store(session_maker):
    return SqlEventStore(session_maker=session_maker)


@pytest.fixture
def invitation_store(session_maker):
    return SqlInvitationStore(session_maker=session_maker)


@pytest.fixture
def owner_id() -> UUID:
    return OWNER_ID


@pytest.fixture
def owner_headers(owner_id) -> dict[str, str]:
    return {"X-User-Id": str(owner_id)}


@pytest.fixture
def delivery_client():
    return InMemoryDeliveryClient()


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
async def client(event_store, invitation_store, delivery_client, recording_sleep):
    """API client backed by the in-memory database and a recording delivery client."""

    def override_get_dispatcher():
        return NotificationDispatcher(
            delivery_client=delivery_client,
            invitation_store=invitation_store,
            config=DispatchConfig(),
            sleep=recording_sleep,
        )

    app.dependency_overrides[get_event_store] = lambda: event_store
    app.dependency_overrides[get_invitation_store] = lambda: invitation_store
    app.dependency_overrides[get_delivery_client] = lambda: delivery_client
    app.dependency_overrides[get_dispatcher] = override_get_dispatcher

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
