"""
Reconciliation Checker.

Audits the mirror against the commerce system. Read-only on both
sides: it pulls from the commerce client, reads the mirror through a
unit of work that is never committed, and returns a report. It never
reads the cache snapshot.
"""
from datetime import timedelta
from decimal import Decimal
import logging
from typing import List, Optional

from core.application.context import SyncContext
from core.application.dtos import (
    INVENTORY_ALL_MATCH,
    INVENTORY_DIVERGENCE,
    ORDER_ALL_RECONCILED,
    ORDER_RECONCILIATION_FAILURE,
    FieldMismatchDTO,
    InventoryReconciliationReport,
    MissingOrderDTO,
    OrderReconciliationReport,
)
from core.domain.entities import CatalogItem, ExternalProduct, OrderSnapshot
from core.domain.value_objects import amounts_match, ensure_utc, utcnow


logger = logging.getLogger(__name__)


def _as_float(amount: Optional[Decimal]) -> Optional[float]:
    return float(amount) if amount is not None else None


class ReconciliationChecker:
    """
    Compares commerce-system state with the mirror.

    Usage:
        checker = ReconciliationChecker(context)
        report = await checker.check_inventory()
        report = await checker.check_orders()
    """

    def __init__(self, context: SyncContext):
        self.context = context
        self.tolerance: Decimal = context.settings.sync.price_tolerance

    # =========================================================================
    # INVENTORY
    # =========================================================================

    async def check_inventory(self) -> InventoryReconciliationReport:
        """
        Compare stock, name and price of every item present in both
        systems.

        Items present on one side only are listed separately and are
        not counted as mismatches. A missing count on either side is
        compared as 0.
        """
        client = self.context.require_commerce_client()
        started = utcnow()

        external = {product.item.id: product for product in await client.fetch_catalog()}

        async with self.context.unit_of_work() as uow:
            mirrored = {item.id: item for item in await uow.catalog.list_items()}
            levels = await uow.inventory.current_levels()

        common = sorted(external.keys() & mirrored.keys())
        mismatches: List[FieldMismatchDTO] = []
        for item_id in common:
            mismatches.extend(
                self._compare_item(external[item_id], mirrored[item_id], levels.get(item_id))
            )

        report = InventoryReconciliationReport(
            status=INVENTORY_DIVERGENCE if mismatches else INVENTORY_ALL_MATCH,
            checked_at=started,
            total_checked=len(common),
            mismatch_count=len(mismatches),
            mismatches=mismatches,
            external_only=sorted(external.keys() - mirrored.keys()),
            mirror_only=sorted(mirrored.keys() - external.keys()),
        )

        if mismatches:
            logger.warning(
                f"⚠️ Inventory divergence: {len(mismatches)} mismatch(es) across {len(common)} item(s)"
            )
        else:
            logger.info(f"✅ Inventory matches for {len(common)} item(s)")
        if report.external_only:
            logger.info(f"{len(report.external_only)} item(s) not mirrored yet: {report.external_only[:10]}")
        return report

    def _compare_item(
        self,
        product: ExternalProduct,
        item: CatalogItem,
        mirror_level: Optional[int],
    ) -> List[FieldMismatchDTO]:
        found = []
        expected_stock = product.stock_level if product.stock_level is not None else 0
        actual_stock = mirror_level if mirror_level is not None else 0
        if expected_stock != actual_stock:
            found.append(
                FieldMismatchDTO(id=item.id, field="stock", expected=expected_stock, actual=mirror_level)
            )

        if product.item.name != item.name:
            found.append(
                FieldMismatchDTO(id=item.id, field="name", expected=product.item.name, actual=item.name)
            )

        if not amounts_match(product.item.base_price, item.base_price, self.tolerance):
            found.append(
                FieldMismatchDTO(
                    id=item.id,
                    field="price",
                    expected=_as_float(product.item.base_price),
                    actual=_as_float(item.base_price),
                )
            )
        return found

    # =========================================================================
    # ORDERS
    # =========================================================================

    async def check_orders(self) -> OrderReconciliationReport:
        """
        Compare recent completed orders against the mirror.

        An external order absent from the mirror is a missing order
        once it is older than the propagation window, and a pending
        order before that.
        """
        client = self.context.require_commerce_client()
        sync = self.context.settings.sync
        started = utcnow()
        since = started - timedelta(days=sync.order_lookback_days)
        propagation_cutoff = started - timedelta(minutes=sync.order_propagation_minutes)

        external = await client.fetch_recent_orders(since)

        async with self.context.unit_of_work() as uow:
            mirrored = await uow.orders.find_by_numbers(order.external_order_number for order in external)

        mismatches: List[FieldMismatchDTO] = []
        missing: List[MissingOrderDTO] = []
        pending: List[MissingOrderDTO] = []

        for order in external:
            mirror_order = mirrored.get(order.external_order_number)
            if mirror_order is None:
                entry = self._missing_entry(order)
                created_at = ensure_utc(order.created_at)
                if created_at is not None and created_at > propagation_cutoff:
                    pending.append(entry)
                else:
                    missing.append(entry)
                continue
            mismatches.extend(self._compare_order(order, mirror_order))

        report = OrderReconciliationReport(
            status=ORDER_RECONCILIATION_FAILURE if (missing or mismatches) else ORDER_ALL_RECONCILED,
            checked_at=started,
            lookback_days=sync.order_lookback_days,
            total_checked=len(external),
            mismatch_count=len(mismatches),
            mismatches=mismatches,
            missing_orders=missing,
            pending_orders=pending,
        )

        if missing:
            logger.error(
                f"❌ {len(missing)} order(s) missing from the mirror: "
                f"{[entry.order_number for entry in missing[:10]]}"
            )
        if mismatches:
            logger.warning(f"⚠️ {len(mismatches)} order field mismatch(es)")
        if not missing and not mismatches:
            logger.info(f"✅ All {len(external)} order(s) reconciled ({len(pending)} pending)")
        return report

    def _compare_order(self, order: OrderSnapshot, mirror_order: OrderSnapshot) -> List[FieldMismatchDTO]:
        number = order.external_order_number
        found = []
        if not amounts_match(order.total_amount, mirror_order.total_amount, self.tolerance):
            found.append(
                FieldMismatchDTO(
                    id=number,
                    field="totalAmount",
                    expected=_as_float(order.total_amount),
                    actual=_as_float(mirror_order.total_amount),
                )
            )
        if order.status != mirror_order.status:
            found.append(
                FieldMismatchDTO(
                    id=number,
                    field="status",
                    expected=order.status.value,
                    actual=mirror_order.status.value,
                )
            )
        return found

    @staticmethod
    def _missing_entry(order: OrderSnapshot) -> MissingOrderDTO:
        return MissingOrderDTO(
            order_number=order.external_order_number,
            external_id=order.external_order_id,
            amount=_as_float(order.total_amount),
            created_at=order.created_at,
        )
