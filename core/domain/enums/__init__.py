"""Domain enums."""

from .order_status import EXTERNAL_STATE_MAP, OrderStatus, map_external_state
from .sync_status import (
    LOW_STOCK_THRESHOLD,
    IngestionStatus,
    InventorySource,
    StockStatus,
    stock_status_for,
)

__all__ = [
    "EXTERNAL_STATE_MAP",
    "LOW_STOCK_THRESHOLD",
    "IngestionStatus",
    "InventorySource",
    "OrderStatus",
    "StockStatus",
    "map_external_state",
    "stock_status_for",
]
