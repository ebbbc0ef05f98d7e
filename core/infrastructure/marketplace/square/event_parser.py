"""
Square webhook envelope parser.

Turns a decoded webhook body into exactly one SyncEvent variant.
The envelope shape is strict. Inside data.object, a known nested
object of the wrong JSON type is malformed; missing fields are
tolerated and unknown event types become UnhandledEvent.
"""
import logging
from typing import Any, Dict, List, Optional

from core.domain.events import (
    CatalogItemChanged,
    CatalogVersionUpdated,
    EventEnvelope,
    InventoryCountsUpdated,
    OrderChanged,
    PaymentChanged,
    StockCount,
    SyncEvent,
    UnhandledEvent,
)
from core.domain.exceptions import MalformedPayloadError
from core.domain.value_objects import parse_timestamp
from core.infrastructure.marketplace.square.mapper import SquareMapper
from groove_sdk.square.parsers import parse_catalog_item, parse_inventory_counts, parse_order


logger = logging.getLogger(__name__)

CATALOG_ITEM_EVENTS = ("catalog.item.created", "catalog.item.updated")
CATALOG_VERSION_EVENTS = ("catalog.version.updated", "catalog.item.deleted")
INVENTORY_EVENTS = ("inventory.count.updated", "inventory.physical_count.updated")
ORDER_EVENTS = ("order.created", "order.updated", "order.fulfillment.updated")
PAYMENT_EVENTS = ("payment.created", "payment.updated")


def parse_event(envelope: Any) -> SyncEvent:
    """
    Parse a webhook envelope.

    Args:
        envelope: Decoded JSON body ({type, event_id, created_at, data})

    Returns:
        The matching SyncEvent variant

    Raises:
        MalformedPayloadError: If the body is not an object, lacks
            type or data, or carries a nested object of the wrong type
    """
    if not isinstance(envelope, dict):
        raise MalformedPayloadError("Webhook body must be a JSON object")

    event_type = envelope.get("type")
    if not isinstance(event_type, str) or not event_type.strip():
        raise MalformedPayloadError("Webhook envelope is missing 'type'")

    data = envelope.get("data")
    if not isinstance(data, dict):
        raise MalformedPayloadError("Webhook envelope is missing 'data'")

    meta = EventEnvelope(
        event_type=event_type.strip(),
        event_id=_text(envelope.get("event_id") or envelope.get("eventId")),
        created_at=parse_timestamp(envelope.get("created_at") or envelope.get("createdAt")),
    )
    obj = data.get("object")
    if not isinstance(obj, dict):
        obj = {}

    if meta.event_type in CATALOG_ITEM_EVENTS:
        return _catalog_item_event(meta, data, obj)
    if meta.event_type in CATALOG_VERSION_EVENTS:
        version = _nested(obj, "catalog_version")
        return CatalogVersionUpdated(envelope=meta, updated_at=parse_timestamp(version.get("updated_at")))
    if meta.event_type in INVENTORY_EVENTS:
        return InventoryCountsUpdated(envelope=meta, counts=tuple(_stock_counts(obj)))
    if meta.event_type in ORDER_EVENTS:
        return _order_event(meta, data, obj)
    if meta.event_type in PAYMENT_EVENTS:
        payment = _nested(obj, "payment")
        return PaymentChanged(
            envelope=meta,
            order_id=_text(payment.get("order_id")),
            payment_status=_text(payment.get("status")),
        )
    logger.debug(f"No handler for event type {meta.event_type} ({meta.event_id})")
    return UnhandledEvent(envelope=meta)


def _text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value)


def _nested(container: Dict[str, Any], *keys: str) -> Dict[str, Any]:
    """
    First present value among keys, which must be a JSON object.

    Returns {} when none is present.

    Raises:
        MalformedPayloadError: If the value is present but not an object
    """
    for key in keys:
        value = container.get(key)
        if value is None or value == {}:
            continue
        if not isinstance(value, dict):
            raise MalformedPayloadError(f"'{key}' must be an object, got {type(value).__name__}")
        return value
    return {}


def _catalog_item_event(meta: EventEnvelope, data: Dict[str, Any], obj: Dict[str, Any]) -> SyncEvent:
    catalog_object = _nested(obj, "catalog_object", "item") or obj
    if not catalog_object.get("id") and data.get("id"):
        catalog_object = {**catalog_object, "id": data["id"]}

    item = parse_catalog_item(catalog_object)
    if item is None or not item.name:
        return UnhandledEvent(envelope=meta, reason="catalog object is not a named ITEM")

    return CatalogItemChanged(
        envelope=meta,
        item=SquareMapper.to_catalog_item(item),
        detail=SquareMapper.to_item_detail(item),
        is_new=meta.event_type == "catalog.item.created",
    )


def _stock_counts(obj: Dict[str, Any]) -> List[StockCount]:
    raw = obj.get("inventory_counts")
    if raw is None:
        raw = [obj] if obj.get("catalog_object_id") else []
    if not isinstance(raw, list):
        raise MalformedPayloadError(f"'inventory_counts' must be a list, got {type(raw).__name__}")
    return [SquareMapper.to_stock_count(count) for count in parse_inventory_counts(raw)]


def _order_event(meta: EventEnvelope, data: Dict[str, Any], obj: Dict[str, Any]) -> SyncEvent:
    payload = _nested(obj, "order_created", "order_updated", "order_fulfillment_updated", "order") or obj
    if not payload.get("id") and data.get("id"):
        payload = {**payload, "id": data["id"]}

    order = parse_order(payload)
    if order is None:
        return UnhandledEvent(envelope=meta, reason="order payload has no id")
    return OrderChanged(
        envelope=meta,
        order=SquareMapper.to_order_snapshot(order),
        complete=isinstance(payload.get("line_items"), list),
    )
