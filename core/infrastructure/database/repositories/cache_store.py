"""
Cache Store Repository.

Holds one denormalized catalog snapshot per key:
{"products": [...], "timestamp": ISO-8601, "count": N}.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.enums import stock_status_for
from core.domain.value_objects import ensure_utc, utcnow
from core.infrastructure.database.models import CacheSnapshotModel
from core.infrastructure.database.upsert import upsert_overwrite


logger = logging.getLogger(__name__)


@dataclass
class CachedCatalog:
    """A catalog snapshot as read from the cache."""
    key: str
    products: List[Dict[str, Any]] = field(default_factory=list)
    timestamp: Optional[str] = None
    count: int = 0
    stale: bool = False
    updated_at: Optional[datetime] = None

    def to_payload(self) -> Dict[str, Any]:
        return {"products": self.products, "timestamp": self.timestamp, "count": self.count}


class CacheStore:
    """
    Key/value store for catalog snapshots.

    The snapshot is a disposable read optimization; nothing in the
    mirror depends on it.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, key: str) -> Optional[CachedCatalog]:
        result = await self.session.execute(
            select(CacheSnapshotModel)
            .where(CacheSnapshotModel.key == key)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        if model is None:
            logger.info(f"Cache miss: {key}")
            return None

        value = model.value or {}
        products = list(value.get("products") or [])
        return CachedCatalog(
            key=model.key,
            products=products,
            timestamp=value.get("timestamp"),
            count=int(value.get("count", len(products))),
            stale=bool(model.stale),
            updated_at=ensure_utc(model.updated_at),
        )

    async def put(
        self,
        key: str,
        products: List[Dict[str, Any]],
        timestamp: Optional[datetime] = None,
    ) -> CachedCatalog:
        """Replace the snapshot for key and clear its stale flag."""
        timestamp = ensure_utc(timestamp) or utcnow()
        value = {
            "products": products,
            "timestamp": timestamp.isoformat(),
            "count": len(products),
        }
        stmt = upsert_overwrite(
            self.session,
            CacheSnapshotModel.__table__,
            values={"key": key, "value": value, "stale": False, "updated_at": utcnow()},
            index_elements=["key"],
            update_columns=["value", "stale", "updated_at"],
        )
        await self.session.execute(stmt)
        logger.info(f"✅ Cached {len(products)} products under {key}")
        return CachedCatalog(key=key, products=products, timestamp=value["timestamp"], count=len(products))

    async def mark_stale(self, key: str) -> bool:
        """Flag the snapshot for rebuild. Returns False when there is no snapshot."""
        result = await self.session.execute(
            update(CacheSnapshotModel)
            .where(CacheSnapshotModel.key == key)
            .values(stale=True, updated_at=utcnow())
        )
        marked = result.rowcount > 0
        if marked:
            logger.info(f"Cache {key} marked stale")
        return marked

    async def patch_stock(self, key: str, item_id: str, stock_level: int) -> bool:
        """
        Update stockCount/status of one product inside the snapshot.

        Returns False when the snapshot or the product is absent.
        """
        result = await self.session.execute(
            select(CacheSnapshotModel)
            .where(CacheSnapshotModel.key == key)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        if model is None:
            return False

        value = dict(model.value or {})
        products = [dict(product) for product in value.get("products") or []]
        patched = False
        for product in products:
            if product.get("id") == item_id:
                product["stockCount"] = stock_level
                product["status"] = stock_status_for(stock_level).value
                patched = True

        if not patched:
            return False

        value["products"] = products
        await self.session.execute(
            update(CacheSnapshotModel)
            .where(CacheSnapshotModel.key == key)
            .values(value=value, updated_at=utcnow())
        )
        logger.info(f"Cache {key}: stock for {item_id} set to {stock_level}")
        return True
