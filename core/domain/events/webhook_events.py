"""
Typed webhook events.

Every inbound delivery is parsed into exactly one of the variants
below. SyncEvent is the closed union the ingestor dispatches on.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple, Union

from ..entities import CatalogItem, ItemDetail, OrderSnapshot, StockCount


@dataclass(frozen=True)
class EventEnvelope:
    """Envelope fields shared by every delivery."""
    event_type: str
    event_id: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class CatalogItemChanged:
    envelope: EventEnvelope
    item: CatalogItem
    detail: ItemDetail
    is_new: bool = False


@dataclass(frozen=True)
class CatalogVersionUpdated:
    envelope: EventEnvelope
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class InventoryCountsUpdated:
    envelope: EventEnvelope
    counts: Tuple[StockCount, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class OrderChanged:
    """
    complete is False when the payload was a change notification
    without line items; the full order must then be re-pulled.
    """
    envelope: EventEnvelope
    order: OrderSnapshot
    complete: bool = True


@dataclass(frozen=True)
class PaymentChanged:
    envelope: EventEnvelope
    order_id: Optional[str] = None
    payment_status: Optional[str] = None


@dataclass(frozen=True)
class UnhandledEvent:
    envelope: EventEnvelope
    reason: str = "unsupported event type"


SyncEvent = Union[
    CatalogItemChanged,
    CatalogVersionUpdated,
    InventoryCountsUpdated,
    OrderChanged,
    PaymentChanged,
    UnhandledEvent,
]
