"""
Square payload models.

Amounts stay in integer minor units here; converting them to
decimals is the caller's job.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple


@dataclass(frozen=True)
class SquareCatalogItem:
    id: str
    name: str
    description: Optional[str] = None
    variation_ids: Tuple[str, ...] = ()
    price_amount: Optional[int] = None
    currency: Optional[str] = None
    category_id: Optional[str] = None
    image_ids: Tuple[str, ...] = ()
    image_url: Optional[str] = None
    is_deleted: bool = False
    updated_at: Optional[datetime] = None

    @property
    def primary_variation_id(self) -> Optional[str]:
        return self.variation_ids[0] if self.variation_ids else None


@dataclass(frozen=True)
class SquareInventoryCount:
    catalog_object_id: str
    quantity: int
    state: Optional[str] = None
    location_id: Optional[str] = None
    calculated_at: Optional[datetime] = None


@dataclass(frozen=True)
class SquareLineItem:
    catalog_object_id: Optional[str]
    quantity: int
    base_price_amount: Optional[int] = None
    item_type: Optional[str] = None
    name: Optional[str] = None
    uid: Optional[str] = None


@dataclass(frozen=True)
class SquareOrder:
    id: str
    reference_id: Optional[str] = None
    customer_id: Optional[str] = None
    state: Optional[str] = None
    total_amount: Optional[int] = None
    location_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    line_items: Tuple[SquareLineItem, ...] = ()

    @property
    def order_number(self) -> str:
        """Merchant-facing number: reference_id when set, else the Square id."""
        return self.reference_id or self.id
