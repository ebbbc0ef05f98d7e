"""
Inventory entities.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..enums import InventorySource


@dataclass(frozen=True)
class StockCount:
    """Quantity reported for one catalog object at one location."""
    catalog_object_id: str
    quantity: int
    state: Optional[str] = None
    calculated_at: Optional[datetime] = None
    location_id: Optional[str] = None


@dataclass(frozen=True)
class InventoryObservation:
    """
    One stock-level reading at a point in time.

    Readings are keyed by item, catalog object (a variation id, or the
    item id itself) and location. An item's level is the sum of the
    latest reading per key.
    """
    item_id: str
    stock_level: int
    recorded_at: datetime
    source: InventorySource
    event_id: Optional[str] = None
    catalog_object_id: Optional[str] = None
    location_id: Optional[str] = None

    def __post_init__(self):
        if self.stock_level < 0:
            raise ValueError(f"Stock level cannot be negative: {self.stock_level}")

    @property
    def object_id(self) -> str:
        return self.catalog_object_id or self.item_id
