"""Unit tests for SquareMapper and SquareCommerceClient."""
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from core.domain.enums import OrderStatus
from core.infrastructure.marketplace.square import SquareCommerceClient, SquareMapper
from groove_sdk.square import SquareCatalogItem, SquareInventoryCount, SquareLineItem, SquareOrder


class FakeSquareAPI:
    """Stands in for groove_sdk.square.SquareAPI."""

    def __init__(self, items=(), counts=(), orders=()):
        self.items = list(items)
        self.counts = list(counts)
        self.orders = {order.id: order for order in orders}
        self.requested_ids = []

    async def list_catalog_items(self, include_images=True):
        return list(self.items)

    async def batch_retrieve_inventory_counts(self, catalog_object_ids, states=("IN_STOCK",)):
        self.requested_ids = list(catalog_object_ids)
        return [c for c in self.counts if c.catalog_object_id in self.requested_ids]

    async def search_orders(self, created_after, states=("COMPLETED",), limit=500):
        return list(self.orders.values())

    async def retrieve_order(self, order_id):
        return self.orders.get(order_id)


def test_item_detail_never_carries_uncategorized():
    detail = SquareMapper.to_item_detail(SquareCatalogItem(id="G1", name="Gift Card"))

    assert detail.category is None
    assert detail.format == "Vinyl"


def test_item_detail_uses_image_as_thumbnail():
    item = SquareCatalogItem(id="A1", name="Radiohead - OK Computer", image_url="https://img/1.jpg")

    assert SquareMapper.to_item_detail(item).thumbnail_url == "https://img/1.jpg"


def test_order_snapshot_maps_state_and_lines():
    order = SquareOrder(
        id="sq-1",
        reference_id="ORD-1",
        state="OPEN",
        total_amount=1999,
        line_items=(
            SquareLineItem(catalog_object_id="A1-V1", quantity=1, base_price_amount=1999),
            SquareLineItem(catalog_object_id="A1-V1", quantity=0),
            SquareLineItem(catalog_object_id=None, quantity=1),
        ),
    )

    snapshot = SquareMapper.to_order_snapshot(order)

    assert snapshot.external_order_number == "ORD-1"
    assert snapshot.status == OrderStatus.PROCESSING
    assert snapshot.total_amount == Decimal("19.99")
    assert len(snapshot.lines) == 1


@pytest.mark.asyncio
async def test_fetch_catalog_sums_variation_counts():
    api = FakeSquareAPI(
        items=[
            SquareCatalogItem(id="A1", name="Radiohead - OK Computer", variation_ids=("A1-V1", "A1-V2"),
                              price_amount=2999),
            SquareCatalogItem(id="B1", name="Nirvana - Nevermind", variation_ids=("B1-V1",)),
        ],
        counts=[
            SquareInventoryCount(catalog_object_id="A1-V1", quantity=2, state="IN_STOCK"),
            SquareInventoryCount(catalog_object_id="A1-V2", quantity=3, state="IN_STOCK"),
            SquareInventoryCount(catalog_object_id="A1-V2", quantity=-1, state="IN_STOCK"),
        ],
    )
    client = SquareCommerceClient(api)

    products = await client.fetch_catalog()

    by_id = {p.item.id: p for p in products}
    assert by_id["A1"].stock_level == 5
    assert by_id["A1"].item.base_price == Decimal("29.99")
    assert by_id["A1"].object_ids == ("A1", "A1-V1", "A1-V2")
    assert by_id["B1"].stock_level is None
    assert api.requested_ids == ["A1-V1", "A1-V2", "B1-V1"]


@pytest.mark.asyncio
async def test_fetch_order_maps_or_returns_none():
    created = datetime(2024, 5, 1, tzinfo=timezone.utc)
    api = FakeSquareAPI(orders=[SquareOrder(id="sq-1", state="COMPLETED", created_at=created)])
    client = SquareCommerceClient(api)

    order = await client.fetch_order("sq-1")

    assert order.external_order_number == "sq-1"
    assert order.status == OrderStatus.CONFIRMED
    assert await client.fetch_order("missing") is None
