"""
Inventory Ledger Repository.

Append-only time series of stock observations, keyed by item,
catalog object (variation) and location. Current stock is the sum of
the latest observation per key by recorded_at, so deliveries may
arrive in any order and a count for one variation never hides
another.
"""
from datetime import datetime
from typing import Dict, Iterable, List, Optional
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.entities import InventoryObservation
from core.domain.enums import InventorySource
from core.domain.value_objects import ensure_utc, utcnow
from core.infrastructure.database.models import InventoryObservationModel


logger = logging.getLogger(__name__)


class InventoryLedger:
    """
    Stock-level ledger.

    There is no update or delete path: every reading is a new row.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def record(
        self,
        item_id: str,
        stock_level: int,
        source: InventorySource,
        recorded_at: Optional[datetime] = None,
        event_id: Optional[str] = None,
        catalog_object_id: Optional[str] = None,
        location_id: Optional[str] = None,
    ) -> InventoryObservation:
        """
        Append one observation.

        Args:
            item_id: Mirrored catalog item id
            stock_level: Observed quantity (>= 0)
            source: webhook, sync or manual
            recorded_at: When the level was observed (defaults to now)
            event_id: Delivery that carried the reading, if any
            catalog_object_id: Variation the reading is for (defaults
                to the item itself)
            location_id: Location the reading is for, if known

        Raises:
            ValueError: If stock_level is negative
        """
        observation = InventoryObservation(
            item_id=item_id,
            stock_level=int(stock_level),
            recorded_at=ensure_utc(recorded_at) or utcnow(),
            source=InventorySource(source),
            event_id=event_id,
            catalog_object_id=catalog_object_id or item_id,
            location_id=location_id,
        )

        self.session.add(
            InventoryObservationModel(
                item_id=observation.item_id,
                catalog_object_id=observation.object_id,
                location_id=observation.location_id,
                stock_level=observation.stock_level,
                recorded_at=observation.recorded_at,
                source=observation.source.value,
                event_id=observation.event_id,
            )
        )
        await self.session.flush()

        logger.info(
            f"✅ Recorded stock {observation.stock_level} for {item_id}/{observation.object_id} "
            f"at {observation.recorded_at.isoformat()} ({observation.source.value})"
        )
        return observation

    async def current_level(self, item_id: str) -> Optional[int]:
        """
        Current stock of one item, or None if the item has never been
        observed. 0 is a real level.
        """
        levels = await self.current_levels([item_id])
        return levels.get(item_id)

    async def current_levels(self, item_ids: Optional[Iterable[str]] = None) -> Dict[str, int]:
        """
        Current level for many items in one query.

        Items with no observations are absent from the result.
        """
        ranked = select(
            InventoryObservationModel.item_id,
            InventoryObservationModel.stock_level,
            func.row_number()
            .over(
                partition_by=(
                    InventoryObservationModel.item_id,
                    InventoryObservationModel.catalog_object_id,
                    InventoryObservationModel.location_id,
                ),
                order_by=(
                    InventoryObservationModel.recorded_at.desc(),
                    InventoryObservationModel.id.desc(),
                ),
            )
            .label("row_rank"),
        )
        if item_ids is not None:
            wanted = list(set(item_ids))
            if not wanted:
                return {}
            ranked = ranked.where(InventoryObservationModel.item_id.in_(wanted))

        ranked = ranked.subquery()
        result = await self.session.execute(
            select(ranked.c.item_id, func.sum(ranked.c.stock_level))
            .where(ranked.c.row_rank == 1)
            .group_by(ranked.c.item_id)
        )
        return {item_id: int(stock_level) for item_id, stock_level in result.all()}

    async def history(self, item_id: str, limit: int = 50) -> List[InventoryObservation]:
        """Most recent observations first."""
        result = await self.session.execute(
            select(InventoryObservationModel)
            .where(InventoryObservationModel.item_id == item_id)
            .order_by(
                InventoryObservationModel.recorded_at.desc(),
                InventoryObservationModel.id.desc(),
            )
            .limit(limit)
        )
        return [
            InventoryObservation(
                item_id=model.item_id,
                stock_level=model.stock_level,
                recorded_at=ensure_utc(model.recorded_at),
                source=InventorySource(model.source),
                event_id=model.event_id,
                catalog_object_id=model.catalog_object_id,
                location_id=model.location_id,
            )
            for model in result.scalars().all()
        ]
