"""
Order Status Enum.

Internal four-state order lifecycle and the fixed mapping
from the commerce system's order states onto it.
"""
from enum import Enum
from typing import Optional


class OrderStatus(str, Enum):
    """Order status values stored in the mirror."""

    PENDING = "Pending"
    PROCESSING = "Processing"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"


EXTERNAL_STATE_MAP = {
    "DRAFT": OrderStatus.PENDING,
    "OPEN": OrderStatus.PROCESSING,
    "COMPLETED": OrderStatus.CONFIRMED,
    "CANCELED": OrderStatus.CANCELLED,
}


def map_external_state(state: Optional[str]) -> OrderStatus:
    """
    Map an external order state onto OrderStatus.

    Unknown or missing states fall back to PROCESSING so a new
    vendor state never fails ingestion.
    """
    if not state:
        return OrderStatus.PROCESSING
    return EXTERNAL_STATE_MAP.get(state.strip().upper(), OrderStatus.PROCESSING)
