"""
Catalog entities.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass, fields
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from .inventory import StockCount


@dataclass(frozen=True)
class CatalogItem:
    """
    Normalized catalog record keyed by the commerce system's item id.

    name and base_price are source-of-truth fields and are fully
    overwritten on every upsert. variation_id is the primary variation;
    variation_ids lists all of them, and inventory counts and order
    lines may reference any.
    """
    id: str
    name: str
    base_price: Optional[Decimal] = None
    variation_id: Optional[str] = None
    variation_ids: Tuple[str, ...] = ()
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.id:
            raise ValueError("Catalog item id cannot be empty")


@dataclass(frozen=True)
class ItemDetail:
    """
    Descriptive and enrichment attributes of a catalog item.

    Every attribute is optional: None means "unknown in this update"
    and never erases a stored value.
    """
    item_id: str
    category: Optional[str] = None
    format: Optional[str] = None
    condition_sleeve: Optional[str] = None
    condition_media: Optional[str] = None
    description: Optional[str] = None
    is_staff_pick: Optional[bool] = None
    thumbnail_url: Optional[str] = None
    tracklist: Optional[List[Dict[str, Any]]] = None
    enrichment_release_id: Optional[int] = None
    enrichment_year: Optional[int] = None
    enrichment_label: Optional[str] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.item_id:
            raise ValueError("Item detail requires an item_id")

    def attributes(self) -> Dict[str, Any]:
        """All mergeable attributes (everything except the key and timestamp)."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name not in ("item_id", "updated_at")
        }

    @property
    def has_enrichment(self) -> bool:
        return self.enrichment_release_id is not None


@dataclass(frozen=True)
class ExternalProduct:
    """
    One catalog entry as pulled from the commerce system.

    stock_level is None when the pull did not include a count for
    any of the item's variations; otherwise it is the sum of
    stock_counts, which keep one entry per variation and location.
    """
    item: CatalogItem
    detail: ItemDetail
    variation_ids: Tuple[str, ...] = ()
    stock_level: Optional[int] = None
    stock_counts: Tuple[StockCount, ...] = ()
    image_url: Optional[str] = None

    @property
    def object_ids(self) -> Tuple[str, ...]:
        """Item id plus every variation id; counts may reference either."""
        return (self.item.id,) + tuple(v for v in self.variation_ids if v != self.item.id)


@dataclass(frozen=True)
class ReleaseMetadata:
    """Release facts fetched from the enrichment API."""
    release_id: int
    title: str
    year: Optional[int] = None
    label: Optional[str] = None
    tracklist: Tuple[Dict[str, Any], ...] = ()
    thumbnail_url: Optional[str] = None
