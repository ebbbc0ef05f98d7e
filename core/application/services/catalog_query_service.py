"""Read-side queries over the cache and the mirror."""
import logging
from datetime import timedelta
from typing import Any, Dict

from core.application.context import SyncContext
from core.application.dtos import CatalogSnapshotDTO, ItemViewDTO
from core.application.services.product_projection import build_item_view
from core.domain.enums import IngestionStatus
from core.domain.exceptions import EntityNotFoundError
from core.domain.value_objects import utcnow


logger = logging.getLogger(__name__)


class CatalogQueryService:
    """
    Storefront and operator reads. Nothing here writes.
    """

    def __init__(self, context: SyncContext):
        self.context = context

    async def get_snapshot(self) -> CatalogSnapshotDTO:
        """The cached catalog, or an empty snapshot on a miss."""
        async with self.context.unit_of_work() as uow:
            cached = await uow.cache.get(self.context.cache_key)
        if cached is None:
            return CatalogSnapshotDTO()
        return CatalogSnapshotDTO(
            products=cached.products,
            timestamp=cached.timestamp,
            count=cached.count,
            stale=cached.stale,
        )

    async def get_item(self, item_id: str) -> ItemViewDTO:
        """
        Mirror view of one item.

        Raises:
            EntityNotFoundError: If the item is not mirrored
        """
        async with self.context.unit_of_work() as uow:
            item = await uow.catalog.get_item(item_id)
            if item is None:
                raise EntityNotFoundError("CatalogItem", item_id)
            detail = await uow.catalog.get_detail(item_id)
            stock_level = await uow.inventory.current_level(item_id)
        return build_item_view(item, detail, stock_level)

    async def webhook_stats(self, hours: int = 24) -> Dict[str, Any]:
        """Audit-trail counts by ingestion status over the last `hours`."""
        since = utcnow() - timedelta(hours=hours)
        async with self.context.unit_of_work() as uow:
            counts = await uow.audit.count_by_status(since)

        by_status = {status.value: int(counts.get(status.value, 0)) for status in IngestionStatus}
        return {
            "since": since.isoformat(),
            "windowHours": hours,
            "total": sum(by_status.values()),
            "byStatus": by_status,
        }
