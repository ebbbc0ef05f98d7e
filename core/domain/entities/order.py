"""
Order snapshot entities.

An OrderSnapshot is the full authoritative state of one order as
carried by a single event: header fields plus the complete list of
line items.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple

from ..enums import OrderStatus


@dataclass(frozen=True)
class OrderLine:
    """Single purchased line referencing a catalog object id."""
    item_id: str
    quantity: int
    price_at_purchase: Optional[Decimal] = None

    def __post_init__(self):
        if self.quantity <= 0:
            raise ValueError(f"Line quantity must be positive: {self.quantity}")


@dataclass(frozen=True)
class OrderSnapshot:
    """Order header plus its complete line-item list."""
    external_order_number: str
    status: OrderStatus
    total_amount: Optional[Decimal] = None
    external_order_id: Optional[str] = None
    customer_id: Optional[str] = None
    created_at: Optional[datetime] = None
    lines: Tuple[OrderLine, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not self.external_order_number:
            raise ValueError("Order snapshot requires an external order number")


@dataclass(frozen=True)
class OrderUpsertResult:
    """Outcome of OrderMirror.upsert_order."""
    order_id: int
    was_inserted: bool
    items_written: int = 0
    skipped_item_ids: Tuple[str, ...] = ()
