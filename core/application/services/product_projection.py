"""Storefront product projection."""
from typing import Any, Dict, Optional

from core.application.dtos import ItemViewDTO, ProductProjectionDTO
from core.domain.entities import CatalogItem, ItemDetail
from core.domain.enums import stock_status_for


def build_projection(
    item: CatalogItem,
    detail: Optional[ItemDetail],
    stock_level: Optional[int],
    image_url: Optional[str] = None,
) -> Dict[str, Any]:
    """
    JSON-ready projection of one product for the cache snapshot.

    A product with no observed stock is shown as sold out.
    """
    detail = detail or ItemDetail(item_id=item.id)
    projection = ProductProjectionDTO(
        id=item.id,
        name=item.name,
        price=float(item.base_price) if item.base_price is not None else None,
        stock_count=stock_level if stock_level is not None else 0,
        status=stock_status_for(stock_level or 0).value,
        category=detail.category,
        format=detail.format,
        condition_sleeve=detail.condition_sleeve,
        condition_media=detail.condition_media,
        description=detail.description,
        is_staff_pick=bool(detail.is_staff_pick),
        image_url=detail.thumbnail_url or image_url,
        year=detail.enrichment_year,
        label=detail.enrichment_label,
    )
    return projection.model_dump(mode="json", by_alias=True)


def build_item_view(
    item: CatalogItem,
    detail: Optional[ItemDetail],
    stock_level: Optional[int],
) -> ItemViewDTO:
    """Mirror read of one item; stock_level stays None when never observed."""
    attributes = detail.attributes() if detail is not None else {}
    return ItemViewDTO(
        id=item.id,
        name=item.name,
        price=float(item.base_price) if item.base_price is not None else None,
        variation_id=item.variation_id,
        stock_level=stock_level,
        status=stock_status_for(stock_level).value if stock_level is not None else None,
        updated_at=item.updated_at,
        **attributes,
    )
