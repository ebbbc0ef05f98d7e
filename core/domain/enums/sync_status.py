"""Status enums used across the sync engine."""
from enum import Enum


class InventorySource(str, Enum):
    """Origin of an inventory observation."""

    WEBHOOK = "webhook"
    SYNC = "sync"
    MANUAL = "manual"


class IngestionStatus(str, Enum):
    """Outcome of a single webhook delivery, as written to the audit trail."""

    PROCESSED = "processed"
    SKIPPED = "skipped"
    FAILED = "failed"


class StockStatus(str, Enum):
    """Storefront availability derived from the current stock level."""

    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    SOLD_OUT = "sold_out"


LOW_STOCK_THRESHOLD = 3


def stock_status_for(stock_level: int) -> StockStatus:
    if stock_level <= 0:
        return StockStatus.SOLD_OUT
    if stock_level <= LOW_STOCK_THRESHOLD:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK
