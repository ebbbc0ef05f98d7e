"""Shared fixtures: in-memory mirror database, settings and a SyncContext."""
import json
from typing import Any, Dict, Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from core.application.context import SyncContext
from core.infrastructure.adapters.notifications.mock_notification_service import MockNotificationService
from core.infrastructure.concurrency import KeyedLock, RateLimiter
from core.infrastructure.database.config import DatabaseSettings, build_session_factory, init_database
from core.infrastructure.security import compute_signature
from core.settings.modules import (
    AppSettings,
    DiscogsSettings,
    IntegrationsSettings,
    SlackSettings,
    SquareSettings,
    SyncSettings,
    WebhookSettings,
)
from tests.mocks.fake_commerce_client import FakeCommerceClient
from tests.mocks.fake_enrichment_client import FakeEnrichmentClient


# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

INVENTORY_KEY = "inventory-test-key"
ORDER_KEY = "order-test-key"
CATALOG_KEY = "catalog-test-key"
ROUTE_KEYS = {"inventory": INVENTORY_KEY, "orders": ORDER_KEY, "catalog": CATALOG_KEY}


def make_settings(**sync_overrides) -> AppSettings:
    """Settings isolated from any local .env file."""
    return AppSettings(
        database=DatabaseSettings(database_url=TEST_DATABASE_URL, _env_file=None),
        square=SquareSettings(_env_file=None),
        webhooks=WebhookSettings(
            _env_file=None,
            inventory_signature_key=INVENTORY_KEY,
            order_signature_key=ORDER_KEY,
            catalog_signature_key=CATALOG_KEY,
        ),
        discogs=DiscogsSettings(_env_file=None),
        sync=SyncSettings(_env_file=None, **sync_overrides),
        integrations=IntegrationsSettings(slack=SlackSettings(_env_file=None)),
    )


def signed(route: str, payload: Any, key: Optional[str] = None) -> Dict[str, Any]:
    """Raw body plus a valid signature header for a route."""
    body = json.dumps(payload).encode("utf-8")
    signature = compute_signature(body, key or ROUTE_KEYS[route])
    return {"body": body, "headers": {"x-square-hmacsha256-signature": signature}}


@pytest_asyncio.fixture
async def test_engine():
    """Create test database engine with all tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    await init_database(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine):
    return build_session_factory(test_engine)


@pytest.fixture
def settings() -> AppSettings:
    return make_settings()


@pytest.fixture
def commerce_client() -> FakeCommerceClient:
    return FakeCommerceClient()


@pytest.fixture
def enrichment_client() -> FakeEnrichmentClient:
    return FakeEnrichmentClient()


@pytest.fixture
def notification_service() -> MockNotificationService:
    return MockNotificationService()


@pytest.fixture
def context(settings, session_factory, commerce_client, notification_service) -> SyncContext:
    """SyncContext over the in-memory mirror with fake external clients."""
    return SyncContext(
        settings=settings,
        session_factory=session_factory,
        commerce_client=commerce_client,
        notification_service=notification_service,
        rate_limiter=RateLimiter(600, name="test"),
        enrichment_client=None,
        order_locks=KeyedLock(),
    )
