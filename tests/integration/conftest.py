"""Pytest configuration and fixtures for API integration tests."""
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from api import dependencies
from api.main import app
from core.application.services import (
    CatalogQueryService,
    CatalogRefreshService,
    EnrichmentService,
    ReconciliationAlerter,
    ReconciliationChecker,
    WebhookIngestor,
)


@pytest_asyncio.fixture
async def client(context):
    """
    HTTP client over the app with every dependency bound to the test
    SyncContext. Lifespan events are not run, so the production
    database is never touched.
    """
    overrides = {
        dependencies.get_sync_context: lambda: context,
        dependencies.get_webhook_ingestor: lambda: WebhookIngestor(context),
        dependencies.get_catalog_query_service: lambda: CatalogQueryService(context),
        dependencies.get_catalog_refresh_service: lambda: CatalogRefreshService(context),
        dependencies.get_enrichment_service: lambda: EnrichmentService(context),
        dependencies.get_reconciliation_checker: lambda: ReconciliationChecker(context),
        dependencies.get_reconciliation_alerter: lambda: ReconciliationAlerter(context.notification_service),
    }
    app.dependency_overrides.update(overrides)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
        yield http

    app.dependency_overrides.clear()
    dependencies.reset_dependencies()
