"""DTOs for catalog reads, cache refresh and enrichment."""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductProjectionDTO(CamelModel):
    """
    Storefront projection of one product, as stored in the cache
    snapshot.
    """

    id: str
    name: str
    price: Optional[float] = None
    stock_count: Optional[int] = None
    status: str
    category: Optional[str] = None
    format: Optional[str] = None
    condition_sleeve: Optional[str] = None
    condition_media: Optional[str] = None
    description: Optional[str] = None
    is_staff_pick: bool = False
    image_url: Optional[str] = None
    year: Optional[int] = None
    label: Optional[str] = None


class CatalogSnapshotDTO(CamelModel):
    """Cache read contract; an empty snapshot is returned on a miss."""

    products: List[Dict[str, Any]] = Field(default_factory=list)
    timestamp: Optional[str] = None
    count: int = 0
    stale: bool = False


class ItemViewDTO(CamelModel):
    """Mirror read of one catalog item with its detail and current stock."""

    id: str
    name: str
    price: Optional[float] = None
    variation_id: Optional[str] = None
    stock_level: Optional[int] = Field(None, description="None when never observed")
    status: Optional[str] = None
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


class RefreshResultDTO(CamelModel):
    """Outcome of a full pull-based cache refresh."""

    total: int = 0
    succeeded: int = 0
    failed: int = 0
    errors: List[str] = Field(default_factory=list)
    timestamp: Optional[str] = None


class EnrichmentResultDTO(CamelModel):
    """Outcome of one enrichment lookup."""

    item_id: str
    status: str = Field(..., description="enriched, no_match, skipped or disabled")
    release_id: Optional[int] = None
    year: Optional[int] = None
    label: Optional[str] = None
    track_count: int = 0
    reason: Optional[str] = None
