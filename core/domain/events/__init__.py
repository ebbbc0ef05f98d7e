"""Domain events."""

from .webhook_events import (
    CatalogItemChanged,
    CatalogVersionUpdated,
    EventEnvelope,
    InventoryCountsUpdated,
    OrderChanged,
    PaymentChanged,
    StockCount,
    SyncEvent,
    UnhandledEvent,
)

__all__ = [
    "CatalogItemChanged",
    "CatalogVersionUpdated",
    "EventEnvelope",
    "InventoryCountsUpdated",
    "OrderChanged",
    "PaymentChanged",
    "StockCount",
    "SyncEvent",
    "UnhandledEvent",
]
