"""
Catalog Refresh Service.

Pull-based full resync: pulls the whole catalog with stock from the
commerce system, writes it through the mirror one product at a time
and rebuilds the storefront cache snapshot.
"""
import logging
from typing import Dict, List

from core.application.context import SyncContext
from core.application.dtos import RefreshResultDTO
from core.application.services.product_projection import build_projection
from core.domain.entities import ExternalProduct
from core.domain.enums import InventorySource
from core.domain.value_objects import utcnow


logger = logging.getLogger(__name__)


class CatalogRefreshService:
    """
    Warms the cache from a full pull.

    Each product is written in its own unit of work, so one bad record
    only fails itself. The snapshot is written last and clears the
    stale flag.

    Usage:
        result = await CatalogRefreshService(context).refresh()
    """

    def __init__(self, context: SyncContext):
        self.context = context

    async def refresh(self) -> RefreshResultDTO:
        client = self.context.require_commerce_client()
        started = utcnow()
        logger.info("🔄 Starting full catalog refresh")

        products = await client.fetch_catalog()

        mirrored: List[ExternalProduct] = []
        errors: List[str] = []
        for product in products:
            try:
                await self._mirror_product(product, started)
                mirrored.append(product)
            except Exception as e:
                logger.error(f"❌ Failed to mirror {product.item.id} ({product.item.name}): {e}", exc_info=True)
                errors.append(f"{product.item.id}: {e}")

        # only products that made it into the mirror are projected
        snapshot = await self._write_snapshot(mirrored, started)
        succeeded = len(mirrored)

        result = RefreshResultDTO(
            total=len(products),
            succeeded=succeeded,
            failed=len(errors),
            errors=errors,
            timestamp=snapshot.timestamp,
        )
        logger.info(
            f"✅ Catalog refresh complete: {succeeded}/{len(products)} mirrored, "
            f"{len(errors)} failed, {snapshot.count} cached"
        )
        return result

    async def _mirror_product(self, product: ExternalProduct, observed_at) -> None:
        async with self.context.unit_of_work() as uow:
            await uow.catalog.upsert_item(product.item)
            await uow.catalog.upsert_item_detail(product.detail)
            for count in product.stock_counts:
                await uow.inventory.record(
                    product.item.id,
                    max(count.quantity, 0),
                    InventorySource.SYNC,
                    recorded_at=observed_at,
                    catalog_object_id=count.catalog_object_id,
                    location_id=count.location_id,
                )
            if product.stock_level is not None and not product.stock_counts:
                await uow.inventory.record(
                    product.item.id,
                    max(product.stock_level, 0),
                    InventorySource.SYNC,
                    recorded_at=observed_at,
                )
            await uow.commit()

    async def _write_snapshot(self, products: List[ExternalProduct], timestamp):
        async with self.context.unit_of_work() as uow:
            details = await uow.catalog.list_details()
            levels: Dict[str, int] = await uow.inventory.current_levels(
                product.item.id for product in products
            )
            projections = [
                build_projection(
                    product.item,
                    details.get(product.item.id),
                    levels.get(product.item.id),
                    image_url=product.image_url,
                )
                for product in products
            ]
            snapshot = await uow.cache.put(self.context.cache_key, projections, timestamp)
            await uow.commit()
        return snapshot
