"""
Webhook endpoints.

Each route reads the raw body (the signature covers the exact bytes)
and hands it to the WebhookIngestor, which owns authentication,
parsing and the mirror writes.
"""
from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import JSONResponse
import logging

from api.dependencies import get_enrichment_service, get_webhook_ingestor
from core.application.services import EnrichmentService, WebhookIngestor
from core.domain.exceptions import GrooveSyncError
from core.settings.modules import CATALOG_ROUTE, INVENTORY_ROUTE, ORDERS_ROUTE


logger = logging.getLogger(__name__)
router = APIRouter()


async def _enrich_in_background(service: EnrichmentService, item_id: str) -> None:
    try:
        result = await service.enrich_item(item_id)
        logger.info(f"Background enrichment for {item_id}: {result.status}")
    except GrooveSyncError as e:
        logger.warning(f"⚠️ Background enrichment for {item_id} failed: {e}")
    except Exception as e:
        logger.error(f"❌ Background enrichment for {item_id} failed: {e}", exc_info=True)


async def _ingest(
    route: str,
    request: Request,
    background_tasks: BackgroundTasks,
    ingestor: WebhookIngestor,
    enrichment_service: EnrichmentService,
) -> JSONResponse:
    raw_body = await request.body()
    result = await ingestor.ingest(route, raw_body, request.headers)

    if result.enrich_item_id:
        background_tasks.add_task(_enrich_in_background, enrichment_service, result.enrich_item_id)

    return JSONResponse(status_code=result.status_code, content=result.body)


@router.post(
    "/inventory",
    summary="Inventory webhook",
    description="inventory.count.updated deliveries; updates the ledger and patches the cache"
)
async def inventory_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    ingestor: WebhookIngestor = Depends(get_webhook_ingestor),
    enrichment_service: EnrichmentService = Depends(get_enrichment_service),
):
    return await _ingest(INVENTORY_ROUTE, request, background_tasks, ingestor, enrichment_service)


@router.post(
    "/orders",
    summary="Order webhook",
    description="order.* and payment.* deliveries; upserts the order mirror"
)
async def orders_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    ingestor: WebhookIngestor = Depends(get_webhook_ingestor),
    enrichment_service: EnrichmentService = Depends(get_enrichment_service),
):
    return await _ingest(ORDERS_ROUTE, request, background_tasks, ingestor, enrichment_service)


@router.post(
    "/catalog",
    summary="Catalog webhook",
    description="catalog.* deliveries; upserts items and marks the cache stale"
)
async def catalog_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    ingestor: WebhookIngestor = Depends(get_webhook_ingestor),
    enrichment_service: EnrichmentService = Depends(get_enrichment_service),
):
    return await _ingest(CATALOG_ROUTE, request, background_tasks, ingestor, enrichment_service)
