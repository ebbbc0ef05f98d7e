"""Square commerce client (ICommerceClient over groove_sdk.square)."""

from collections import defaultdict
from dataclasses import replace
from datetime import datetime
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from core.application.interfaces import ICommerceClient
from core.domain.entities import ExternalProduct, OrderSnapshot, StockCount
from core.infrastructure.marketplace.square.mapper import SquareMapper
from core.settings.modules.square_settings import SquareSettings
from groove_sdk.square import SquareAPI


logger = logging.getLogger(__name__)

IN_STOCK = "IN_STOCK"


class SquareCommerceClient(ICommerceClient):
    """Read-only pulls from Square, mapped to domain entities."""

    def __init__(self, api: SquareAPI):
        self.api = api

    @classmethod
    def from_settings(cls, settings: SquareSettings) -> "SquareCommerceClient":
        """
        Build the client from SquareSettings.

        Raises:
            ValueError: If SQUARE_ACCESS_TOKEN is not set
        """
        api = SquareAPI(
            access_token=settings.access_token,
            base_url=settings.base_url,
            api_version=settings.api_version,
            location_ids=[settings.location_id] if settings.location_id else None,
            timeout_seconds=settings.timeout_seconds,
        )
        logger.info(f"SquareCommerceClient initialized ({settings.environment})")
        return cls(api)

    async def fetch_catalog(self) -> List[ExternalProduct]:
        items = await self.api.list_catalog_items()

        object_ids: List[str] = []
        for item in items:
            object_ids.extend(item.variation_ids or (item.id,))

        by_object: Dict[str, List[StockCount]] = defaultdict(list)
        for count in await self._in_stock_counts(object_ids):
            by_object[count.catalog_object_id].append(count)

        products = []
        for item in items:
            ids = item.variation_ids or (item.id,)
            item_counts = [count for object_id in ids for count in by_object.get(object_id, ())]
            products.append(SquareMapper.to_external_product(item, item_counts))

        logger.info(f"✅ Pulled {len(products)} catalog products from Square")
        return products

    async def fetch_stock_levels(self, object_ids: Sequence[str]) -> Dict[str, int]:
        """IN_STOCK quantity per object id, summed across locations."""
        levels: Dict[str, int] = defaultdict(int)
        for count in await self._in_stock_counts(object_ids):
            levels[count.catalog_object_id] += count.quantity
        return dict(levels)

    async def _in_stock_counts(self, object_ids: Sequence[str]) -> List[StockCount]:
        """One IN_STOCK count per (object id, location); negatives count as 0."""
        counts = await self.api.batch_retrieve_inventory_counts(object_ids, states=(IN_STOCK,))
        merged: Dict[Tuple[str, Optional[str]], StockCount] = {}
        for count in counts:
            if count.state not in (None, IN_STOCK):
                continue
            stock_count = SquareMapper.to_stock_count(count)
            stock_count = replace(stock_count, quantity=max(stock_count.quantity, 0))
            key = (stock_count.catalog_object_id, stock_count.location_id)
            if key in merged:
                stock_count = replace(stock_count, quantity=stock_count.quantity + merged[key].quantity)
            merged[key] = stock_count
        return list(merged.values())

    async def fetch_recent_orders(self, created_after: datetime) -> List[OrderSnapshot]:
        orders = await self.api.search_orders(created_after=created_after, states=("COMPLETED",))
        return [SquareMapper.to_order_snapshot(order) for order in orders]

    async def fetch_order(self, order_id: str) -> Optional[OrderSnapshot]:
        order = await self.api.retrieve_order(order_id)
        if order is None:
            return None
        return SquareMapper.to_order_snapshot(order)
