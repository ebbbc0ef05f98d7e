"""Square SDK model to domain entity mapper."""

from dataclasses import replace
import logging
from typing import List, Sequence

from core.domain.entities import (
    CatalogItem,
    ExternalProduct,
    ItemDetail,
    OrderLine,
    OrderSnapshot,
    StockCount,
)
from core.domain.enums import map_external_state
from core.domain.services import UNCATEGORIZED, infer_attributes, merge_with_inferred
from core.domain.value_objects import from_minor_units
from groove_sdk.square.models import (
    SquareCatalogItem,
    SquareInventoryCount,
    SquareLineItem,
    SquareOrder,
)


logger = logging.getLogger(__name__)

MIRRORED_LINE_TYPE = "ITEM"


class SquareMapper:
    """Mapper for converting Square SDK models to domain entities."""

    @staticmethod
    def to_catalog_item(item: SquareCatalogItem) -> CatalogItem:
        """Amounts arrive in minor units and are divided by 100 here, once."""
        return CatalogItem(
            id=item.id,
            name=item.name,
            base_price=from_minor_units(item.price_amount),
            variation_id=item.primary_variation_id,
            variation_ids=item.variation_ids,
            updated_at=item.updated_at,
        )

    @staticmethod
    def to_item_detail(item: SquareCatalogItem) -> ItemDetail:
        """
        Build the item detail, filling category, format and condition
        from the item's free text.

        "Uncategorized" is never written: it would overwrite a known
        category under the COALESCE merge.
        """
        detail = ItemDetail(
            item_id=item.id,
            description=item.description,
            thumbnail_url=item.image_url,
        )
        detail = merge_with_inferred(detail, infer_attributes(item.name, item.description))
        if detail.category == UNCATEGORIZED:
            detail = replace(detail, category=None)
        return detail

    @staticmethod
    def to_external_product(
        item: SquareCatalogItem,
        stock_counts: Sequence[StockCount] = (),
    ) -> ExternalProduct:
        """stock_level is the sum of the counts, or None when there are none."""
        return ExternalProduct(
            item=SquareMapper.to_catalog_item(item),
            detail=SquareMapper.to_item_detail(item),
            variation_ids=item.variation_ids,
            stock_level=sum(count.quantity for count in stock_counts) if stock_counts else None,
            stock_counts=tuple(stock_counts),
            image_url=item.image_url,
        )

    @staticmethod
    def to_stock_count(count: SquareInventoryCount) -> StockCount:
        return StockCount(
            catalog_object_id=count.catalog_object_id,
            quantity=count.quantity,
            state=count.state,
            calculated_at=count.calculated_at,
            location_id=count.location_id,
        )

    @staticmethod
    def to_order_snapshot(order: SquareOrder) -> OrderSnapshot:
        """
        Convert a Square order to an OrderSnapshot.

        Only ITEM lines with a catalog object id and a positive
        quantity are kept; custom amounts and service charges are not
        catalog items.
        """
        return OrderSnapshot(
            external_order_number=order.order_number,
            external_order_id=order.id,
            customer_id=order.customer_id,
            total_amount=from_minor_units(order.total_amount),
            status=map_external_state(order.state),
            created_at=order.created_at,
            lines=tuple(SquareMapper._to_lines(order)),
        )

    @staticmethod
    def _to_lines(order: SquareOrder) -> List[OrderLine]:
        lines = []
        for line in order.line_items:
            if not SquareMapper._is_mirrored_line(line):
                logger.debug(
                    f"Order {order.order_number}: ignoring line {line.uid or line.name} "
                    f"(type={line.item_type}, quantity={line.quantity})"
                )
                continue
            lines.append(
                OrderLine(
                    item_id=line.catalog_object_id,
                    quantity=line.quantity,
                    price_at_purchase=from_minor_units(line.base_price_amount),
                )
            )
        return lines

    @staticmethod
    def _is_mirrored_line(line: SquareLineItem) -> bool:
        item_type = line.item_type or MIRRORED_LINE_TYPE
        return item_type == MIRRORED_LINE_TYPE and bool(line.catalog_object_id) and line.quantity > 0
