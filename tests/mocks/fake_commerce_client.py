"""
In-memory commerce client.

Tests seed products, stock and orders directly; every pull is
recorded in `calls` so tests can assert what was fetched.
"""
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from core.application.interfaces import ICommerceClient
from core.domain.entities import ExternalProduct, OrderSnapshot


class FakeCommerceClient(ICommerceClient):

    def __init__(self):
        self.products: List[ExternalProduct] = []
        self.stock: Dict[str, int] = {}
        self.orders: Dict[str, OrderSnapshot] = {}
        self.calls: List[str] = []

    def add_product(self, product: ExternalProduct) -> None:
        self.products.append(product)

    def add_order(self, order: OrderSnapshot) -> None:
        self.orders[order.external_order_id or order.external_order_number] = order

    async def fetch_catalog(self) -> List[ExternalProduct]:
        self.calls.append("fetch_catalog")
        return list(self.products)

    async def fetch_stock_levels(self, object_ids: Sequence[str]) -> Dict[str, int]:
        self.calls.append("fetch_stock_levels")
        return {object_id: self.stock[object_id] for object_id in object_ids if object_id in self.stock}

    async def fetch_recent_orders(self, created_after: datetime) -> List[OrderSnapshot]:
        self.calls.append("fetch_recent_orders")
        recent = [
            order for order in self.orders.values()
            if order.created_at is None or order.created_at >= created_after
        ]
        return sorted(recent, key=lambda order: order.created_at or created_after, reverse=True)

    async def fetch_order(self, order_id: str) -> Optional[OrderSnapshot]:
        self.calls.append(f"fetch_order:{order_id}")
        return self.orders.get(order_id)
