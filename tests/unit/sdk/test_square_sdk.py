"""Unit tests for the Square SDK parsers and client."""
from datetime import datetime, timezone

import pytest

from groove_sdk.errors import SquareAPIError
from groove_sdk.square import SquareAPI
from groove_sdk.square.parsers import (
    money_amount,
    parse_catalog_item,
    parse_inventory_counts,
    parse_order,
    parse_quantity,
)
from tests.mocks.fake_http import FakeSession


ITEM_OBJECT = {
    "type": "ITEM",
    "id": "A1",
    "updated_at": "2024-05-01T12:00:00Z",
    "item_data": {
        "name": "Radiohead - OK Computer",
        "description": "Reissue on 180g vinyl",
        "image_ids": ["IMG1"],
        "variations": [
            {"id": "A1-V1", "item_variation_data": {"price_money": {"amount": 2999, "currency": "USD"}}},
            {"id": "A1-V2", "item_variation_data": {"price_money": {"amount": 3499, "currency": "USD"}}},
        ],
    },
}


# =============================================================================
# PARSERS
# =============================================================================

def test_parse_catalog_item_uses_first_variation_price():
    item = parse_catalog_item(ITEM_OBJECT)

    assert item.id == "A1"
    assert item.name == "Radiohead - OK Computer"
    assert item.price_amount == 2999
    assert item.currency == "USD"
    assert item.variation_ids == ("A1-V1", "A1-V2")
    assert item.primary_variation_id == "A1-V1"
    assert item.image_ids == ("IMG1",)
    assert item.updated_at == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def test_parse_catalog_item_rejects_other_types():
    assert parse_catalog_item({"type": "CATEGORY", "id": "C1"}) is None
    assert parse_catalog_item({"type": "ITEM"}) is None


def test_parse_catalog_item_tolerates_wrongly_typed_fields():
    item = parse_catalog_item({
        "type": "ITEM",
        "id": "A1",
        "item_data": {
            "name": "Album One",
            "variations": [{"id": "A1-V1", "item_variation_data": "nope"}, "A1-V2"],
            "categories": "Jazz",
            "image_ids": {"IMG1": True},
        },
    })

    assert item.variation_ids == ("A1-V1",)
    assert item.price_amount is None
    assert item.category_id is None
    assert item.image_ids == ()
    assert parse_catalog_item({"type": "ITEM", "id": "A2", "item_data": "oops"}).name == ""


@pytest.mark.parametrize("value,expected", [
    ("3", 3), ("2.0", 2), (5, 5), (None, None), ("x", None),
    ("Infinity", None), ("-Infinity", None), ("NaN", None), (float("inf"), None),
])
def test_parse_quantity(value, expected):
    assert parse_quantity(value) == expected


def test_money_amount_accepts_numeric_strings_only():
    assert money_amount({"amount": 1500}) == 1500
    assert money_amount({"amount": "1500"}) == 1500
    assert money_amount({"amount": "15.00"}) is None
    assert money_amount(None) is None


def test_parse_inventory_counts_drops_unusable_entries():
    counts = parse_inventory_counts([
        {"catalog_object_id": "A1-V1", "quantity": "4", "state": "IN_STOCK"},
        {"catalog_object_id": "A1-V2", "quantity": "n/a"},
        {"quantity": "1"},
    ])

    assert len(counts) == 1
    assert counts[0].catalog_object_id == "A1-V1"
    assert counts[0].quantity == 4


def test_parse_order_total_falls_back_to_net_amounts():
    order = parse_order({
        "id": "sq-1",
        "state": "COMPLETED",
        "net_amounts": {"total_money": {"amount": 4200}},
        "line_items": [{"catalog_object_id": "A1-V1", "quantity": "2", "base_price_money": {"amount": 2100}}],
    })

    assert order.total_amount == 4200
    assert order.order_number == "sq-1"
    assert order.line_items[0].quantity == 2


def test_order_number_prefers_reference_id():
    order = parse_order({"id": "sq-1", "reference_id": "ORD-1"})

    assert order.order_number == "ORD-1"


# =============================================================================
# CLIENT
# =============================================================================

def test_client_requires_token():
    with pytest.raises(ValueError):
        SquareAPI(access_token="")


@pytest.mark.asyncio
async def test_list_catalog_items_follows_cursor_and_attaches_images():
    deleted = {**ITEM_OBJECT, "id": "A2", "is_deleted": True}
    session = FakeSession([
        (200, {"objects": [ITEM_OBJECT], "cursor": "page-2"}),
        (200, {"objects": [deleted]}),
        (200, {"objects": [{"type": "IMAGE", "id": "IMG1", "image_data": {"url": "https://img/1.jpg"}}]}),
    ])
    api = SquareAPI(access_token="token", session=session)

    items = await api.list_catalog_items()

    assert [item.id for item in items] == ["A1"]
    assert items[0].image_url == "https://img/1.jpg"
    assert session.calls[1]["params"]["cursor"] == "page-2"
    assert session.calls[2]["json"] == {"object_ids": ["IMG1"]}
    assert session.calls[0]["headers"]["Authorization"] == "Bearer token"


@pytest.mark.asyncio
async def test_inventory_counts_use_configured_locations():
    session = FakeSession([
        (200, {"counts": [{"catalog_object_id": "A1-V1", "quantity": "3", "state": "IN_STOCK"}]}),
    ])
    api = SquareAPI(access_token="token", location_ids=["LOC1"], session=session)

    counts = await api.batch_retrieve_inventory_counts(["A1-V1", "A1-V1", ""])

    assert [c.quantity for c in counts] == [3]
    payload = session.last()["json"]
    assert payload["catalog_object_ids"] == ["A1-V1"]
    assert payload["location_ids"] == ["LOC1"]
    assert payload["states"] == ["IN_STOCK"]


@pytest.mark.asyncio
async def test_search_orders_filters_by_state_and_creation_time():
    session = FakeSession([
        (200, {"locations": [{"id": "LOC1", "status": "ACTIVE"}, {"id": "LOC2", "status": "INACTIVE"}]}),
        (200, {"orders": [{"id": "sq-1", "state": "COMPLETED"}]}),
    ])
    api = SquareAPI(access_token="token", session=session)

    orders = await api.search_orders(datetime(2024, 5, 1, tzinfo=timezone.utc))

    assert [o.id for o in orders] == ["sq-1"]
    payload = session.last()["json"]
    assert payload["location_ids"] == ["LOC1"]
    assert payload["query"]["filter"]["state_filter"] == {"states": ["COMPLETED"]}
    assert payload["query"]["filter"]["date_time_filter"]["created_at"]["start_at"] == "2024-05-01T00:00:00Z"


@pytest.mark.asyncio
async def test_retrieve_order_returns_none_on_404():
    session = FakeSession([(404, {"errors": [{"code": "NOT_FOUND", "detail": "Order not found"}]})])
    api = SquareAPI(access_token="token", session=session)

    assert await api.retrieve_order("missing") is None


@pytest.mark.asyncio
async def test_error_response_raises_with_square_error_codes():
    session = FakeSession([(401, {"errors": [{"code": "UNAUTHORIZED", "detail": "Bad token"}]})])
    api = SquareAPI(access_token="token", session=session)

    with pytest.raises(SquareAPIError) as exc_info:
        await api.retrieve_order("sq-1")

    assert exc_info.value.status == 401
    assert "UNAUTHORIZED" in str(exc_info.value)
