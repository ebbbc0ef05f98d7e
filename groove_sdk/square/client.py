from groove_sdk.logging import get_logger
from groove_sdk.errors import SquareAPIError
logger = get_logger("SquareAPI")

# ====================== ⚙️ SQUARE API ======================
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence

import aiohttp

from groove_sdk.square.models import SquareCatalogItem, SquareInventoryCount, SquareOrder
from groove_sdk.square.parsers import (
    parse_catalog_item,
    parse_image_urls,
    parse_inventory_counts,
    parse_order,
)


SQUARE_PRODUCTION_URL = "https://connect.squareup.com"
SQUARE_SANDBOX_URL = "https://connect.squareupsandbox.com"
DEFAULT_API_VERSION = "2024-10-17"

BATCH_RETRIEVE_LIMIT = 1000
INVENTORY_BATCH_LIMIT = 1000
ORDER_SEARCH_LIMIT = 500


def _chunks(values: Sequence[str], size: int) -> Iterable[Sequence[str]]:
    for start in range(0, len(values), size):
        yield values[start:start + size]


def _rfc3339(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


class SquareAPI:
    """
    Read-only client for the Square REST API (v2).

    Covers the pulls the sync engine needs: catalog listing, inventory
    batch counts, order search and single-order retrieval. Every call
    is a plain aiohttp request; an externally owned ClientSession can
    be injected, otherwise a short-lived one is opened per call.
    """

    def __init__(
        self,
        access_token: str,
        base_url: str = SQUARE_PRODUCTION_URL,
        api_version: str = DEFAULT_API_VERSION,
        location_ids: Optional[Sequence[str]] = None,
        timeout_seconds: float = 30.0,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        if not access_token:
            raise ValueError("Square access token is required")
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self.location_ids = [loc for loc in (location_ids or []) if loc]
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._access_token = access_token
        self._session = session

    def __repr__(self) -> str:
        return f"<SquareAPI base_url={self.base_url} version={self.api_version}>"

    # =========================================================================
    # HTTP
    # =========================================================================

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._access_token}",
            "Square-Version": self.api_version,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        if self._session is not None:
            return await self._send(self._session, method, path, params, payload)
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            return await self._send(session, method, path, params, payload)

    async def _send(
        self,
        session: aiohttp.ClientSession,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]],
        payload: Optional[Dict[str, Any]],
    ) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        async with session.request(
            method, url, headers=self._headers(), params=params, json=payload
        ) as response:
            body = await response.json(content_type=None)
            if response.status >= 400:
                errors = (body or {}).get("errors") if isinstance(body, dict) else None
                detail = "; ".join(
                    f"{e.get('code')}: {e.get('detail')}" for e in errors or [] if isinstance(e, dict)
                ) or str(body)
                logger.error(f"❌ {method} {path} failed [{response.status}]: {detail}")
                raise SquareAPIError(response.status, detail, body)
            return body or {}

    # =========================================================================
    # LOCATIONS
    # =========================================================================

    async def list_location_ids(self) -> List[str]:
        """Configured location ids, or every active location of the account."""
        if self.location_ids:
            return list(self.location_ids)
        body = await self._request("GET", "/v2/locations")
        self.location_ids = [
            loc["id"] for loc in body.get("locations") or []
            if loc.get("id") and loc.get("status", "ACTIVE") == "ACTIVE"
        ]
        return list(self.location_ids)

    # =========================================================================
    # CATALOG
    # =========================================================================

    async def list_catalog_items(self, include_images: bool = True) -> List[SquareCatalogItem]:
        """
        Every non-deleted ITEM in the catalog (all pages).

        Args:
            include_images: Resolve the first image id of each item to a URL
        """
        items: List[SquareCatalogItem] = []
        cursor: Optional[str] = None

        while True:
            params = {"types": "ITEM"}
            if cursor:
                params["cursor"] = cursor
            body = await self._request("GET", "/v2/catalog/list", params=params)

            for obj in body.get("objects") or []:
                item = parse_catalog_item(obj)
                if item is not None and not item.is_deleted:
                    items.append(item)

            cursor = body.get("cursor")
            if not cursor:
                break

        logger.info(f"✅ Listed {len(items)} catalog items")

        if include_images:
            items = await self._attach_images(items)
        return items

    async def _attach_images(self, items: List[SquareCatalogItem]) -> List[SquareCatalogItem]:
        from dataclasses import replace

        image_ids = sorted({item.image_ids[0] for item in items if item.image_ids})
        if not image_ids:
            return items

        urls: Dict[str, str] = {}
        for chunk in _chunks(image_ids, BATCH_RETRIEVE_LIMIT):
            body = await self._request(
                "POST", "/v2/catalog/batch-retrieve", payload={"object_ids": list(chunk)}
            )
            urls.update(parse_image_urls(body.get("objects") or []))

        return [
            replace(item, image_url=urls.get(item.image_ids[0])) if item.image_ids else item
            for item in items
        ]

    async def retrieve_catalog_item(self, object_id: str) -> Optional[SquareCatalogItem]:
        try:
            body = await self._request("GET", f"/v2/catalog/object/{object_id}")
        except SquareAPIError as e:
            if e.status == 404:
                return None
            raise
        return parse_catalog_item(body.get("object") or {})

    # =========================================================================
    # INVENTORY
    # =========================================================================

    async def batch_retrieve_inventory_counts(
        self,
        catalog_object_ids: Sequence[str],
        states: Sequence[str] = ("IN_STOCK",),
    ) -> List[SquareInventoryCount]:
        """Current counts for the given catalog object (variation) ids."""
        ids = [object_id for object_id in dict.fromkeys(catalog_object_ids) if object_id]
        if not ids:
            return []

        location_ids = await self.list_location_ids()
        counts: List[SquareInventoryCount] = []

        for chunk in _chunks(ids, INVENTORY_BATCH_LIMIT):
            cursor: Optional[str] = None
            while True:
                payload: Dict[str, Any] = {"catalog_object_ids": list(chunk), "states": list(states)}
                if location_ids:
                    payload["location_ids"] = location_ids
                if cursor:
                    payload["cursor"] = cursor
                body = await self._request("POST", "/v2/inventory/counts/batch-retrieve", payload=payload)
                counts.extend(parse_inventory_counts(body.get("counts") or []))
                cursor = body.get("cursor")
                if not cursor:
                    break

        logger.info(f"✅ Retrieved {len(counts)} inventory counts for {len(ids)} objects")
        return counts

    # =========================================================================
    # ORDERS
    # =========================================================================

    async def search_orders(
        self,
        created_after: datetime,
        states: Sequence[str] = ("COMPLETED",),
        limit: int = ORDER_SEARCH_LIMIT,
    ) -> List[SquareOrder]:
        """Orders created after a timestamp, newest first (all pages)."""
        location_ids = await self.list_location_ids()
        if not location_ids:
            logger.warning("No Square locations available, order search skipped")
            return []

        orders: List[SquareOrder] = []
        cursor: Optional[str] = None
        while True:
            payload: Dict[str, Any] = {
                "location_ids": location_ids,
                "limit": min(limit, ORDER_SEARCH_LIMIT),
                "query": {
                    "filter": {
                        "state_filter": {"states": list(states)},
                        "date_time_filter": {"created_at": {"start_at": _rfc3339(created_after)}},
                    },
                    "sort": {"sort_field": "CREATED_AT", "sort_order": "DESC"},
                },
            }
            if cursor:
                payload["cursor"] = cursor
            body = await self._request("POST", "/v2/orders/search", payload=payload)
            for obj in body.get("orders") or []:
                order = parse_order(obj)
                if order is not None:
                    orders.append(order)
            cursor = body.get("cursor")
            if not cursor:
                break

        logger.info(f"✅ Found {len(orders)} orders since {_rfc3339(created_after)}")
        return orders

    async def retrieve_order(self, order_id: str) -> Optional[SquareOrder]:
        try:
            body = await self._request("GET", f"/v2/orders/{order_id}")
        except SquareAPIError as e:
            if e.status == 404:
                logger.warning(f"Order not found in Square: {order_id}")
                return None
            raise
        return parse_order(body.get("order") or {})
