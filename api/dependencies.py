"""
FastAPI Dependencies.

Builds the process-scoped SyncContext once and hands out services
over it.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables ONCE before any settings objects are created
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=_PROJECT_ROOT / ".env")

from core.application.context import SyncContext
from core.application.services import (
    CatalogQueryService,
    CatalogRefreshService,
    EnrichmentService,
    ReconciliationAlerter,
    ReconciliationChecker,
    WebhookIngestor,
)
from core.infrastructure.adapters.notifications import build_notification_service
from core.infrastructure.concurrency import KeyedLock, RateLimiter
from core.infrastructure.database.config import get_session_factory
from core.settings import get_app_settings


logger = logging.getLogger(__name__)


# =============================================================================
# SINGLETON INSTANCES
# =============================================================================

_sync_context: Optional[SyncContext] = None
_webhook_ingestor: Optional[WebhookIngestor] = None


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_sync_context() -> SyncContext:
    global _sync_context

    if _sync_context is None:
        settings = get_app_settings()

        commerce_client = None
        if settings.square.configured:
            from core.infrastructure.marketplace.square import SquareCommerceClient
            commerce_client = SquareCommerceClient.from_settings(settings.square)
            logger.info(f"Using Square commerce client ({settings.square.environment})")
        else:
            logger.warning("⚠️ SQUARE_ACCESS_TOKEN not set: pull-based sync disabled")

        rate_limiter = RateLimiter(settings.discogs.requests_per_minute, name="discogs")

        enrichment_client = None
        if settings.discogs.configured:
            from core.infrastructure.adapters.discogs import DiscogsEnrichmentClient
            enrichment_client = DiscogsEnrichmentClient.from_settings(settings.discogs, rate_limiter)
        else:
            logger.info("Release enrichment disabled")

        _sync_context = SyncContext(
            settings=settings,
            session_factory=get_session_factory(),
            commerce_client=commerce_client,
            notification_service=build_notification_service(settings.slack),
            rate_limiter=rate_limiter,
            enrichment_client=enrichment_client,
            order_locks=KeyedLock(),
        )
        logger.info("Created SyncContext")

    return _sync_context


def get_webhook_ingestor() -> WebhookIngestor:
    global _webhook_ingestor

    if _webhook_ingestor is None:
        _webhook_ingestor = WebhookIngestor(get_sync_context())
        logger.info("Created WebhookIngestor instance")

    return _webhook_ingestor


def get_catalog_query_service() -> CatalogQueryService:
    return CatalogQueryService(get_sync_context())


def get_catalog_refresh_service() -> CatalogRefreshService:
    return CatalogRefreshService(get_sync_context())


def get_enrichment_service() -> EnrichmentService:
    return EnrichmentService(get_sync_context())


def get_reconciliation_checker() -> ReconciliationChecker:
    return ReconciliationChecker(get_sync_context())


def get_reconciliation_alerter() -> ReconciliationAlerter:
    context = get_sync_context()
    return ReconciliationAlerter(
        context.notification_service,
        max_findings=context.settings.sync.alert_max_findings,
    )


# =============================================================================
# RESET (for testing)
# =============================================================================

def reset_dependencies():
    global _sync_context, _webhook_ingestor

    _sync_context = None
    _webhook_ingestor = None

    logger.info("Dependencies reset")
