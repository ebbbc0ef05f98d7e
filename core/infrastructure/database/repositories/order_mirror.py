"""
Order Mirror Repository.

Upserts orders keyed by external order number and replaces their
line items wholesale on every delivery.
"""
from typing import Dict, Iterable, List, Optional
import logging

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.entities import OrderLine, OrderSnapshot, OrderUpsertResult
from core.domain.enums import OrderStatus
from core.domain.value_objects import ensure_utc, utcnow
from core.infrastructure.database.models import OrderItemModel, OrderModel
from core.infrastructure.database.repositories.catalog_mirror import CatalogMirror
from core.infrastructure.database.upsert import upsert_coalesce


logger = logging.getLogger(__name__)

ORDER_TABLE = OrderModel.__table__
ORDER_ITEM_TABLE = OrderItemModel.__table__


class OrderMirror:
    """
    Upsert layer for orders and order items.

    The order row upsert, the row lock and the line-item replacement
    all run in the caller's transaction, so a concurrent reader sees
    either the old item set or the new one.
    """

    def __init__(self, session: AsyncSession, catalog: Optional[CatalogMirror] = None):
        self.session = session
        self.catalog = catalog or CatalogMirror(session)

    async def upsert_order(self, order: OrderSnapshot, replace_items: bool = True) -> OrderUpsertResult:
        """
        Insert or update an order and replace its line items.

        Line items whose catalog item is not mirrored yet are skipped
        individually; the rest of the order is still written.

        Args:
            order: Full order snapshot from one event
            replace_items: False to update only the header (the
                snapshot carries no authoritative line items)

        Returns:
            OrderUpsertResult with the surrogate order id and whether
            the row was newly inserted
        """
        number = order.external_order_number
        existing_id = await self._find_id(number)

        # created_at is only overwritten when the event carries one
        overwrite = ["status", "updated_at"]
        if order.created_at is not None:
            overwrite.append("created_at")

        stmt = upsert_coalesce(
            self.session,
            ORDER_TABLE,
            values={
                "external_order_number": number,
                "external_order_id": order.external_order_id,
                "customer_id": order.customer_id,
                "total_amount": order.total_amount,
                "status": order.status.value,
                "created_at": order.created_at or utcnow(),
                "updated_at": utcnow(),
            },
            index_elements=["external_order_number"],
            merge_columns=["external_order_id", "customer_id", "total_amount"],
            overwrite_columns=overwrite,
        )
        await self.session.execute(stmt)

        order_id = await self._lock_order(number)
        items_written, skipped = 0, []
        if replace_items:
            items_written, skipped = await self._replace_items(order_id, order.lines)

        if existing_id is None:
            logger.info(f"✅ Inserted order {number} (id={order_id}, items={items_written})")
        else:
            logger.info(f"✅ Updated order {number} (id={order_id}, items={items_written})")

        return OrderUpsertResult(
            order_id=order_id,
            was_inserted=existing_id is None,
            items_written=items_written,
            skipped_item_ids=tuple(skipped),
        )

    async def _find_id(self, number: str) -> Optional[int]:
        result = await self.session.execute(
            select(OrderModel.id).where(OrderModel.external_order_number == number)
        )
        return result.scalar_one_or_none()

    async def _lock_order(self, number: str) -> int:
        # FOR UPDATE is a no-op on SQLite
        result = await self.session.execute(
            select(OrderModel.id)
            .where(OrderModel.external_order_number == number)
            .with_for_update()
        )
        return result.scalar_one()

    async def _replace_items(self, order_id: int, lines: Iterable[OrderLine]):
        lines = list(lines)
        await self.session.execute(
            delete(OrderItemModel).where(OrderItemModel.order_id == order_id)
        )

        resolved = await self.catalog.resolve_item_ids(line.item_id for line in lines)

        rows: List[dict] = []
        skipped: List[str] = []
        for line in lines:
            item_id = resolved.get(line.item_id)
            if item_id is None:
                skipped.append(line.item_id)
                continue
            rows.append({
                "order_id": order_id,
                "item_id": item_id,
                "quantity": line.quantity,
                "price_at_purchase": line.price_at_purchase,
            })

        if skipped:
            logger.warning(
                f"⚠️ Order {order_id}: skipped {len(skipped)} line item(s) "
                f"referencing unmirrored catalog objects {skipped}"
            )

        if rows:
            await self.session.execute(insert(ORDER_ITEM_TABLE), rows)

        return len(rows), skipped

    # =========================================================================
    # READS
    # =========================================================================

    async def get_order(self, number: str) -> Optional[OrderSnapshot]:
        """Load one mirrored order with its line items."""
        result = await self.session.execute(
            select(OrderModel)
            .where(OrderModel.external_order_number == number)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        if model is None:
            return None

        items = await self.session.execute(
            select(OrderItemModel)
            .where(OrderItemModel.order_id == model.id)
            .order_by(OrderItemModel.id)
            .execution_options(populate_existing=True)
        )
        lines = tuple(
            OrderLine(
                item_id=item.item_id,
                quantity=item.quantity,
                price_at_purchase=item.price_at_purchase,
            )
            for item in items.scalars().all()
        )
        return self._to_snapshot(model, lines)

    async def find_by_numbers(self, numbers: Iterable[str]) -> Dict[str, OrderSnapshot]:
        """Load order headers (no line items) for a set of external numbers."""
        wanted = {number for number in numbers if number}
        if not wanted:
            return {}
        result = await self.session.execute(
            select(OrderModel).where(OrderModel.external_order_number.in_(wanted))
        )
        return {
            model.external_order_number: self._to_snapshot(model, ())
            for model in result.scalars().all()
        }

    @staticmethod
    def _to_snapshot(model: OrderModel, lines) -> OrderSnapshot:
        try:
            status = OrderStatus(model.status)
        except ValueError:
            status = OrderStatus.PROCESSING
        return OrderSnapshot(
            external_order_number=model.external_order_number,
            external_order_id=model.external_order_id,
            customer_id=model.customer_id,
            total_amount=model.total_amount,
            status=status,
            created_at=ensure_utc(model.created_at),
            lines=lines,
        )
