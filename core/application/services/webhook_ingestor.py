"""
Webhook Ingestor.

Authenticates inbound deliveries, parses them into typed events and
applies them to the mirror. Every mutation is an upsert keyed by a
stable external id (inventory observations excepted, which are
append-only), so duplicate and out-of-order deliveries are safe.

Status codes:
    500  no signature key configured, or processing failed
    403  signature missing or invalid (nothing is read or written)
    400  body is not a JSON webhook envelope
    200  processed, or acknowledged and skipped
"""
from dataclasses import dataclass
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Tuple, get_args
from uuid import uuid4

from core.application.context import SyncContext
from core.domain.entities import OrderSnapshot
from core.domain.enums import IngestionStatus, InventorySource
from core.domain.events import (
    CatalogItemChanged,
    CatalogVersionUpdated,
    InventoryCountsUpdated,
    OrderChanged,
    PaymentChanged,
    SyncEvent,
    UnhandledEvent,
)
from core.domain.exceptions import (
    MalformedPayloadError,
    MissingSignatureKeyError,
    SignatureVerificationError,
)
from core.domain.services import is_music_product
from core.domain.value_objects import utcnow
from core.infrastructure.database.unit_of_work import SyncUnitOfWork
from core.infrastructure.logging import correlated
from core.infrastructure.marketplace.square.event_parser import parse_event
from core.infrastructure.security import extract_signature, verify_signature
from core.settings.modules.webhook_settings import (
    CATALOG_ROUTE,
    INVENTORY_ROUTE,
    ORDERS_ROUTE,
    WEBHOOK_ROUTES,
)


logger = logging.getLogger(__name__)

IN_STOCK = "IN_STOCK"

# Event families each route accepts; anything else is acknowledged and skipped.
ROUTE_EVENT_FAMILIES: Dict[str, Tuple[type, ...]] = {
    INVENTORY_ROUTE: (InventoryCountsUpdated,),
    ORDERS_ROUTE: (OrderChanged, PaymentChanged),
    CATALOG_ROUTE: (CatalogItemChanged, CatalogVersionUpdated),
}


@dataclass(frozen=True)
class IngestionResult:
    """HTTP status and JSON body for one delivery."""
    status_code: int
    body: Dict[str, Any]
    enrich_item_id: Optional[str] = None


@dataclass(frozen=True)
class HandlerOutcome:
    status: IngestionStatus
    detail: str
    enrich_item_id: Optional[str] = None


@dataclass
class Delivery:
    """Per-request state threaded through the handlers."""
    route: str
    correlation_id: str
    log: logging.LoggerAdapter
    event_type: Optional[str] = None
    event_id: Optional[str] = None


class WebhookIngestor:
    """
    Signed webhook entry point for the inventory, orders and catalog
    routes.

    Usage:
        ingestor = WebhookIngestor(context)
        result = await ingestor.ingest("orders", raw_body, request.headers)
    """

    def __init__(
        self,
        context: SyncContext,
        parser: Callable[[Any], SyncEvent] = parse_event,
    ):
        """
        Args:
            context: Process-scoped sync context
            parser: Envelope parser producing SyncEvent variants

        Raises:
            TypeError: If a SyncEvent variant has no handler
        """
        self.context = context
        self._parse = parser
        self._handlers: Dict[type, Callable[[Any, Delivery], Awaitable[HandlerOutcome]]] = {
            CatalogItemChanged: self._on_catalog_item_changed,
            CatalogVersionUpdated: self._on_catalog_version_updated,
            InventoryCountsUpdated: self._on_inventory_counts_updated,
            OrderChanged: self._on_order_changed,
            PaymentChanged: self._on_payment_changed,
            UnhandledEvent: self._on_unhandled,
        }
        missing = [variant.__name__ for variant in get_args(SyncEvent) if variant not in self._handlers]
        if missing:
            raise TypeError(f"No webhook handler for event variant(s): {', '.join(missing)}")

    # =========================================================================
    # ENTRY POINT
    # =========================================================================

    async def ingest(
        self,
        route: str,
        raw_body: bytes,
        headers: Mapping[str, str],
    ) -> IngestionResult:
        """
        Authenticate, parse and apply one delivery.

        Args:
            route: inventory, orders or catalog
            raw_body: Request body exactly as received
            headers: Request headers

        Returns:
            IngestionResult with the HTTP status and JSON body
        """
        if route not in WEBHOOK_ROUTES:
            raise ValueError(f"Unknown webhook route: {route}")

        correlation_id = uuid4().hex
        delivery = Delivery(route=route, correlation_id=correlation_id, log=correlated(logger, correlation_id))
        log = delivery.log

        try:
            self._authenticate(route, raw_body, headers)
        except MissingSignatureKeyError as e:
            log.error(f"❌ {e}")
            return self._error(500, "Webhook signature key not configured", delivery)
        except SignatureVerificationError as e:
            log.warning(f"Rejected {route} webhook: {e}")
            return self._error(403, str(e), delivery)

        try:
            event = self._parse(json.loads(raw_body))
        except (ValueError, MalformedPayloadError) as e:
            # json.JSONDecodeError and UnicodeDecodeError are ValueErrors
            log.warning(f"Malformed {route} webhook: {e}")
            return self._error(400, f"Malformed webhook payload: {e}", delivery)

        delivery.event_type = event.envelope.event_type
        delivery.event_id = event.envelope.event_id
        log.info(f"Received {delivery.event_type} ({delivery.event_id}) on {route}")

        try:
            outcome = await self._dispatch(event, delivery)
        except Exception as e:
            log.error(f"❌ Failed to process {delivery.event_type} on {route}: {e}", exc_info=True)
            await self._record_failure(delivery, e)
            await self.context.notification_service.send_error(
                correlation_id,
                f"webhook:{route}",
                str(e) or type(e).__name__,
                f"{delivery.event_type} ({delivery.event_id})",
            )
            return self._error(500, "Failed to process webhook", delivery)

        marker = "✅" if outcome.status == IngestionStatus.PROCESSED else "⚠️"
        log.info(f"{marker} {delivery.event_type} {outcome.status.value}: {outcome.detail}")
        return IngestionResult(
            status_code=200,
            body={
                "received": True,
                "eventType": delivery.event_type,
                "eventId": delivery.event_id,
                "status": outcome.status.value,
                "detail": outcome.detail,
                "correlationId": correlation_id,
            },
            enrich_item_id=outcome.enrich_item_id,
        )

    def _authenticate(self, route: str, raw_body: bytes, headers: Mapping[str, str]) -> None:
        """
        Raises:
            MissingSignatureKeyError: If the route has no key configured
            SignatureVerificationError: If the signature is absent or wrong
        """
        key = self.context.settings.webhooks.key_for(route)
        if not key:
            raise MissingSignatureKeyError(route)

        signature = extract_signature(headers)
        if not signature:
            raise SignatureVerificationError("Missing webhook signature")

        notification_url = self.context.settings.webhooks.notification_url_for(route)
        if not verify_signature(raw_body, signature, key, notification_url):
            raise SignatureVerificationError("Invalid webhook signature")

    async def _dispatch(self, event: SyncEvent, delivery: Delivery) -> HandlerOutcome:
        if not isinstance(event, ROUTE_EVENT_FAMILIES[delivery.route]) and not isinstance(event, UnhandledEvent):
            return await self._skip(
                delivery, f"{delivery.event_type} is not handled on the {delivery.route} route"
            )
        return await self._handlers[type(event)](event, delivery)

    # =========================================================================
    # HANDLERS
    # =========================================================================

    async def _on_catalog_item_changed(self, event: CatalogItemChanged, delivery: Delivery) -> HandlerOutcome:
        item = event.item
        async with self.context.unit_of_work() as uow:
            await uow.catalog.upsert_item(item)
            await uow.catalog.upsert_item_detail(event.detail)
            await uow.cache.mark_stale(self.context.cache_key)
            outcome = HandlerOutcome(
                IngestionStatus.PROCESSED,
                f"catalog item {item.id} upserted",
                enrich_item_id=item.id if self._should_enrich(event) else None,
            )
            await self._commit(uow, delivery, outcome)
        return outcome

    async def _on_catalog_version_updated(self, event: CatalogVersionUpdated, delivery: Delivery) -> HandlerOutcome:
        async with self.context.unit_of_work() as uow:
            marked = await uow.cache.mark_stale(self.context.cache_key)
            outcome = HandlerOutcome(
                IngestionStatus.PROCESSED,
                "cache marked stale" if marked else "no cache snapshot to invalidate",
            )
            await self._commit(uow, delivery, outcome)
        return outcome

    async def _on_inventory_counts_updated(self, event: InventoryCountsUpdated, delivery: Delivery) -> HandlerOutcome:
        log = delivery.log
        counts = [count for count in event.counts if count.state in (None, IN_STOCK)]
        if not counts:
            return await self._skip(delivery, "no in-stock counts in payload")

        fallback_time = event.envelope.created_at or utcnow()

        async with self.context.unit_of_work() as uow:
            resolved = await uow.catalog.resolve_item_ids(count.catalog_object_id for count in counts)

            touched: Dict[str, int] = {}
            unmirrored = []
            for count in counts:
                item_id = resolved.get(count.catalog_object_id)
                if item_id is None:
                    unmirrored.append(count.catalog_object_id)
                    continue
                quantity = count.quantity
                if quantity < 0:
                    log.warning(f"⚠️ Negative count {quantity} for {count.catalog_object_id}, recording 0")
                    quantity = 0
                await uow.inventory.record(
                    item_id,
                    quantity,
                    InventorySource.WEBHOOK,
                    recorded_at=count.calculated_at or fallback_time,
                    event_id=delivery.event_id,
                    catalog_object_id=count.catalog_object_id,
                    location_id=count.location_id,
                )
                touched[item_id] = touched.get(item_id, 0) + 1

            if unmirrored:
                log.warning(f"⚠️ Skipped counts for unmirrored catalog objects: {unmirrored}")

            # the patched level is the ledger's, so an out-of-order delivery cannot roll the cache back
            levels = await uow.inventory.current_levels(touched)
            for item_id in touched:
                await uow.cache.patch_stock(self.context.cache_key, item_id, levels.get(item_id, 0))

            if touched:
                outcome = HandlerOutcome(
                    IngestionStatus.PROCESSED,
                    f"recorded {sum(touched.values())} count(s) for {len(touched)} item(s), "
                    f"skipped {len(unmirrored)} unmirrored",
                )
            else:
                outcome = HandlerOutcome(IngestionStatus.SKIPPED, "no mirrored items in payload")
            await self._commit(uow, delivery, outcome)
        return outcome

    async def _on_order_changed(self, event: OrderChanged, delivery: Delivery) -> HandlerOutcome:
        order = event.order
        if event.complete:
            return await self._upsert_order(order, delivery)

        client = self.context.commerce_client
        if client is not None and order.external_order_id:
            fetched = await client.fetch_order(order.external_order_id)
            if fetched is not None:
                delivery.log.info(f"Re-pulled full order {order.external_order_id} for partial notification")
                return await self._upsert_order(fetched, delivery)

        delivery.log.warning(
            f"⚠️ Order {order.external_order_number}: notification carries no line items, updating header only"
        )
        return await self._upsert_order(order, delivery, replace_items=False)

    async def _on_payment_changed(self, event: PaymentChanged, delivery: Delivery) -> HandlerOutcome:
        if not event.order_id:
            return await self._skip(delivery, "payment without an order id")

        client = self.context.commerce_client
        if client is None:
            delivery.log.warning(f"⚠️ Payment for order {event.order_id}: commerce client not configured")
            return await self._skip(delivery, "commerce client not configured")

        order = await client.fetch_order(event.order_id)
        if order is None:
            return await self._skip(delivery, f"order {event.order_id} not found in commerce system")
        return await self._upsert_order(order, delivery)

    async def _on_unhandled(self, event: UnhandledEvent, delivery: Delivery) -> HandlerOutcome:
        return await self._skip(delivery, event.reason)

    # =========================================================================
    # HELPERS
    # =========================================================================

    async def _upsert_order(
        self,
        order: OrderSnapshot,
        delivery: Delivery,
        replace_items: bool = True,
    ) -> HandlerOutcome:
        number = order.external_order_number
        async with self.context.order_locks.hold(number):
            async with self.context.unit_of_work() as uow:
                result = await uow.orders.upsert_order(order, replace_items=replace_items)
                action = "inserted" if result.was_inserted else "updated"
                detail = f"order {number} {action} ({result.items_written} item(s)"
                if result.skipped_item_ids:
                    detail += f", skipped unmirrored {list(result.skipped_item_ids)}"
                outcome = HandlerOutcome(IngestionStatus.PROCESSED, detail + ")")
                await self._commit(uow, delivery, outcome)
        return outcome

    async def _skip(self, delivery: Delivery, reason: str) -> HandlerOutcome:
        outcome = HandlerOutcome(IngestionStatus.SKIPPED, reason)
        async with self.context.unit_of_work() as uow:
            await self._commit(uow, delivery, outcome)
        return outcome

    async def _commit(self, uow: SyncUnitOfWork, delivery: Delivery, outcome: HandlerOutcome) -> None:
        """Write the audit row in the mutation's transaction, then commit both."""
        await uow.audit.record(
            route=delivery.route,
            correlation_id=delivery.correlation_id,
            status=outcome.status,
            event_type=delivery.event_type,
            event_id=delivery.event_id,
            detail=outcome.detail,
        )
        await uow.commit()

    async def _record_failure(self, delivery: Delivery, error: Exception) -> None:
        # Fresh session: the failed one may be unusable.
        try:
            async with self.context.unit_of_work() as uow:
                await uow.audit.record(
                    route=delivery.route,
                    correlation_id=delivery.correlation_id,
                    status=IngestionStatus.FAILED,
                    event_type=delivery.event_type,
                    event_id=delivery.event_id,
                    detail=f"{type(error).__name__}: {error}",
                )
                await uow.commit()
        except Exception as audit_error:
            delivery.log.error(f"❌ Could not write failure audit row: {audit_error}")

    def _should_enrich(self, event: CatalogItemChanged) -> bool:
        if not event.is_new or self.context.enrichment_client is None:
            return False
        if not self.context.settings.sync.enrich_on_catalog_events:
            return False
        detail = event.detail
        return is_music_product(event.item.name, detail.description, detail.category, detail.format)

    @staticmethod
    def _error(status_code: int, message: str, delivery: Delivery) -> IngestionResult:
        return IngestionResult(
            status_code=status_code,
            body={"error": message, "errorId": delivery.correlation_id},
        )
