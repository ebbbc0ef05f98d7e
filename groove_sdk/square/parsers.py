"""
Parsers from Square JSON (REST responses and webhook objects) to
SDK models.

Parsers are lenient: unknown fields are ignored, missing optional
fields become None, and objects without an id parse to None.
"""
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional

from groove_sdk.square.models import (
    SquareCatalogItem,
    SquareInventoryCount,
    SquareLineItem,
    SquareOrder,
)


def parse_datetime(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text[-1] in "Zz":
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_quantity(value: Any) -> Optional[int]:
    """Square sends quantities as decimal strings ("3", "2.0")."""
    if value is None or isinstance(value, bool):
        return None
    try:
        quantity = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not quantity.is_finite():
        return None
    return int(quantity)


def money_amount(money: Any) -> Optional[int]:
    if not isinstance(money, dict):
        return None
    amount = money.get("amount")
    if isinstance(amount, bool):
        return None
    if isinstance(amount, int):
        return amount
    if isinstance(amount, str) and amount.strip().lstrip("-").isdigit():
        return int(amount)
    return None


def _object(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value)


def _strings(values: Any) -> tuple:
    return tuple(str(value) for value in _list(values) if value and not isinstance(value, (dict, list)))


def parse_catalog_item(obj: Dict[str, Any]) -> Optional[SquareCatalogItem]:
    """Parse a CatalogObject of type ITEM; other types return None."""
    if not isinstance(obj, dict) or not obj.get("id"):
        return None
    if obj.get("type") not in (None, "ITEM"):
        return None

    data = _object(obj.get("item_data"))
    variations = [v for v in _list(data.get("variations")) if isinstance(v, dict)]

    price_amount = None
    currency = None
    if variations:
        first_price = _object(variations[0].get("item_variation_data")).get("price_money")
        price_amount = money_amount(first_price)
        if isinstance(first_price, dict):
            currency = first_price.get("currency")

    category_id = data.get("category_id")
    if not category_id:
        categories = _list(data.get("categories"))
        if categories and isinstance(categories[0], dict):
            category_id = categories[0].get("id")

    description = _text(data.get("description_plaintext")) or _text(data.get("description"))

    return SquareCatalogItem(
        id=str(obj["id"]),
        name=str(data.get("name") or obj.get("name") or ""),
        description=description or None,
        variation_ids=_strings([v.get("id") for v in variations]),
        price_amount=price_amount,
        currency=currency,
        category_id=_text(category_id),
        image_ids=_strings(data.get("image_ids") or obj.get("image_ids")),
        is_deleted=bool(obj.get("is_deleted", False)),
        updated_at=parse_datetime(obj.get("updated_at")),
    )


def parse_image_urls(objects: Iterable[Dict[str, Any]]) -> Dict[str, str]:
    """Map IMAGE object id -> url from a batch-retrieve response."""
    urls: Dict[str, str] = {}
    for obj in objects or ():
        if not isinstance(obj, dict) or obj.get("type") != "IMAGE":
            continue
        url = _object(obj.get("image_data")).get("url")
        if obj.get("id") and url:
            urls[str(obj["id"])] = url
    return urls


def parse_inventory_count(obj: Dict[str, Any]) -> Optional[SquareInventoryCount]:
    if not isinstance(obj, dict) or not obj.get("catalog_object_id"):
        return None
    quantity = parse_quantity(obj.get("quantity"))
    if quantity is None:
        return None
    return SquareInventoryCount(
        catalog_object_id=str(obj["catalog_object_id"]),
        quantity=quantity,
        state=_text(obj.get("state")),
        location_id=_text(obj.get("location_id")),
        calculated_at=parse_datetime(obj.get("calculated_at")),
    )


def parse_inventory_counts(objects: Iterable[Dict[str, Any]]) -> List[SquareInventoryCount]:
    counts = (parse_inventory_count(obj) for obj in objects or ())
    return [count for count in counts if count is not None]


def parse_line_item(obj: Dict[str, Any]) -> Optional[SquareLineItem]:
    if not isinstance(obj, dict):
        return None
    quantity = parse_quantity(obj.get("quantity"))
    if quantity is None:
        return None
    return SquareLineItem(
        catalog_object_id=_text(obj.get("catalog_object_id")),
        quantity=quantity,
        base_price_amount=money_amount(obj.get("base_price_money")),
        item_type=_text(obj.get("item_type")),
        name=_text(obj.get("name")),
        uid=_text(obj.get("uid")),
    )


def _order_total(obj: Dict[str, Any]) -> Optional[int]:
    amount = money_amount(obj.get("total_money"))
    if amount is None:
        amount = money_amount(_object(obj.get("net_amounts")).get("total_money"))
    return amount


def parse_order(obj: Dict[str, Any]) -> Optional[SquareOrder]:
    if not isinstance(obj, dict) or not obj.get("id"):
        return None
    line_items = (parse_line_item(line) for line in _list(obj.get("line_items")))
    return SquareOrder(
        id=str(obj["id"]),
        reference_id=_text(obj.get("reference_id")) or None,
        customer_id=_text(obj.get("customer_id")) or None,
        state=_text(obj.get("state")),
        total_amount=_order_total(obj),
        location_id=_text(obj.get("location_id")),
        created_at=parse_datetime(obj.get("created_at")),
        updated_at=parse_datetime(obj.get("updated_at")),
        line_items=tuple(line for line in line_items if line is not None),
    )
