"""
Catalog endpoints.

Storefront reads from the cache snapshot, operator reads from the
mirror, on-demand enrichment and cache warming.
"""
from fastapi import APIRouter, Depends, HTTPException, status
import logging

from api.dependencies import (
    get_catalog_query_service,
    get_catalog_refresh_service,
    get_enrichment_service,
)
from core.application.dtos import (
    CatalogSnapshotDTO,
    EnrichmentResultDTO,
    ItemViewDTO,
    RefreshResultDTO,
)
from core.application.services import CatalogQueryService, CatalogRefreshService, EnrichmentService
from core.domain.exceptions import CommerceClientNotConfiguredError, EntityNotFoundError
from groove_sdk.errors import GrooveSDKError


logger = logging.getLogger(__name__)
router = APIRouter()


# =============================================================================
# STOREFRONT READS
# =============================================================================

@router.get(
    "/catalog/products",
    response_model=CatalogSnapshotDTO,
    response_model_by_alias=True,
    summary="Cached product catalog",
    description="Cache snapshot; an empty list when the cache has not been warmed"
)
async def list_products(service: CatalogQueryService = Depends(get_catalog_query_service)):
    return await service.get_snapshot()


@router.get(
    "/catalog/products/{item_id}",
    response_model=ItemViewDTO,
    response_model_by_alias=True,
    summary="Mirrored product",
    description="Item, detail and current stock straight from the mirror"
)
async def get_product(item_id: str, service: CatalogQueryService = Depends(get_catalog_query_service)):
    try:
        return await service.get_item(item_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post(
    "/catalog/products/{item_id}/enrich",
    response_model=EnrichmentResultDTO,
    response_model_by_alias=True,
    summary="Enrich a product",
    description="Look the product up in the release database and merge the metadata"
)
async def enrich_product(
    item_id: str,
    force: bool = False,
    service: EnrichmentService = Depends(get_enrichment_service),
):
    try:
        return await service.enrich_item(item_id, force=force)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except GrooveSDKError as e:
        logger.error(f"❌ Enrichment lookup failed for {item_id}: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


# =============================================================================
# CACHE WARMING
# =============================================================================

@router.post(
    "/cache/warm",
    response_model=RefreshResultDTO,
    response_model_by_alias=True,
    summary="Warm the catalog cache",
    description="Full pull from the commerce system; rewrites the mirror and the cache snapshot"
)
async def warm_cache(service: CatalogRefreshService = Depends(get_catalog_refresh_service)):
    try:
        return await service.refresh()
    except CommerceClientNotConfiguredError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except GrooveSDKError as e:
        logger.error(f"❌ Cache warm failed: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
