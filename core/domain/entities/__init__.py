"""Domain entities."""

from .catalog import CatalogItem, ExternalProduct, ItemDetail, ReleaseMetadata
from .inventory import InventoryObservation, StockCount
from .order import OrderLine, OrderSnapshot, OrderUpsertResult

__all__ = [
    "CatalogItem",
    "ExternalProduct",
    "InventoryObservation",
    "ItemDetail",
    "OrderLine",
    "OrderSnapshot",
    "OrderUpsertResult",
    "ReleaseMetadata",
    "StockCount",
]
