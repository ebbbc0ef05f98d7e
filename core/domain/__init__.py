"""Domain layer - pure domain models, events and inference rules."""

from .entities import CatalogItem, InventoryObservation, ItemDetail, OrderLine, OrderSnapshot
from .enums import InventorySource, OrderStatus

__all__ = [
    "CatalogItem",
    "InventoryObservation",
    "InventorySource",
    "ItemDetail",
    "OrderLine",
    "OrderSnapshot",
    "OrderStatus",
]
