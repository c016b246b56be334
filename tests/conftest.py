"""
Pytest Configuration and Fixtures

Provides fixtures for:
- Database engine/session (async SQLite in memory)
- HTTP test client bound to the FastAPI app
- Payload factory
"""
# Settings are read at import time: WEBHOOK_TOKEN has no default and the
# service refuses to start without it.
import os
os.environ.setdefault("WEBHOOK_TOKEN", "test-webhook-token-do-not-use-in-production")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("API_PREFIX", "/api")
# The app instance is shared across tests; the limiter gets its own tests
os.environ.setdefault("WEBHOOK_RATE_LIMIT_MAX_REQUESTS", "1000000")

import pytest
from typing import Any, AsyncGenerator

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from catalog_webhooks.core.config import settings
from catalog_webhooks.db.database import Base, get_db
from catalog_webhooks.db.models.webhook_payload import WebhookPayload
from catalog_webhooks.db.schema import ensure_schema
from catalog_webhooks.main import app


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
WEBHOOK_TOKEN = settings.WEBHOOK_TOKEN


def attestation(
    workflow_name: str = "build",
    run_id: str = "r1",
    kind: str = "Attestation",
) -> dict[str, Any]:
    """Payload shaped like the deliveries the service usually receives"""
    return {
        "Kind": kind,
        "Metadata": {
            "Workflow": {"Name": workflow_name},
            "WorkflowRun": {"Id": run_id},
        },
    }


@pytest.fixture(scope="function")
async def async_engine():
    """Create async test database engine"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    await ensure_schema(engine)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
async def db_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create async database session for tests"""
    async_session_maker = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture(scope="function")
async def test_client(db_session: AsyncSession):
    """Create test client with database override"""
    from httpx import AsyncClient, ASGITransport

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    # raise_app_exceptions=False: unhandled errors come back as the 500
    # produced by the catch-all handler instead of failing the test
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def webhook_url():
    """Build the ingress URL for an entity, with the valid token by default"""
    def _url(entity_uid: str, token: str | None = WEBHOOK_TOKEN) -> str:
        url = f"/api/entity/{entity_uid}/webhook"
        return f"{url}?token={token}" if token is not None else url

    return _url


# ============================================================================
# Test Data Factories
# ============================================================================

@pytest.fixture
def payload_factory(db_session: AsyncSession):
    """Factory for inserting webhook payload rows directly"""
    async def _create_payload(
        entity_uid: str = "e1",
        payload: Any = None,
    ) -> WebhookPayload:
        record = WebhookPayload(
            entity_uid=entity_uid,
            payload=attestation() if payload is None else payload,
        )
        db_session.add(record)
        await db_session.commit()
        await db_session.refresh(record)
        return record

    return _create_payload


async def count_rows(db_session: AsyncSession, entity_uid: str | None = None) -> int:
    """Row count, optionally for a single entity"""
    from sqlalchemy import select, func

    query = select(func.count(WebhookPayload.id))
    if entity_uid is not None:
        query = query.where(WebhookPayload.entity_uid == entity_uid)
    result = await db_session.execute(query)
    return result.scalar() or 0
