"""Application services."""
from .catalog_query_service import CatalogQueryService
from .catalog_refresh_service import CatalogRefreshService
from .enrichment_service import EnrichmentService
from .reconciliation_alerts import ReconciliationAlerter
from .reconciliation_checker import ReconciliationChecker
from .webhook_ingestor import IngestionResult, WebhookIngestor

__all__ = [
    "CatalogQueryService",
    "CatalogRefreshService",
    "EnrichmentService",
    "IngestionResult",
    "ReconciliationAlerter",
    "ReconciliationChecker",
    "WebhookIngestor",
]
