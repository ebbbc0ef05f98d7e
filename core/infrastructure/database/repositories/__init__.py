"""Mirror repositories."""

from .audit_log import AuditLog
from .cache_store import CacheStore, CachedCatalog
from .catalog_mirror import CatalogMirror
from .inventory_ledger import InventoryLedger
from .order_mirror import OrderMirror

__all__ = [
    "AuditLog",
    "CacheStore",
    "CachedCatalog",
    "CatalogMirror",
    "InventoryLedger",
    "OrderMirror",
]
