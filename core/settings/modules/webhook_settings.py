from __future__ import annotations

from typing import Optional

from pydantic import Field

from core.settings.base import GrooveBaseSettings


INVENTORY_ROUTE = "inventory"
ORDERS_ROUTE = "orders"
CATALOG_ROUTE = "catalog"
WEBHOOK_ROUTES = (INVENTORY_ROUTE, ORDERS_ROUTE, CATALOG_ROUTE)


class WebhookSettings(GrooveBaseSettings):
    """
    Webhook signature keys.

    Each route has its own key. When a route key is not set the
    shared keys are tried in order: SQUARE_SIGNATURE_KEY, then
    SQUARE_WEBHOOK_SIGNATURE_KEY.
    """

    inventory_signature_key: Optional[str] = Field(default=None, alias="INVENTORY_WEBHOOK_SIGNATURE_KEY")
    order_signature_key: Optional[str] = Field(default=None, alias="ORDER_WEBHOOK_SIGNATURE_KEY")
    catalog_signature_key: Optional[str] = Field(default=None, alias="CATALOG_WEBHOOK_SIGNATURE_KEY")
    square_signature_key: Optional[str] = Field(default=None, alias="SQUARE_SIGNATURE_KEY")
    square_webhook_signature_key: Optional[str] = Field(default=None, alias="SQUARE_WEBHOOK_SIGNATURE_KEY")

    # Notification URLs are part of the signed payload when the sender signs url + body.
    inventory_notification_url: Optional[str] = Field(default=None, alias="INVENTORY_WEBHOOK_NOTIFICATION_URL")
    order_notification_url: Optional[str] = Field(default=None, alias="ORDER_WEBHOOK_NOTIFICATION_URL")
    catalog_notification_url: Optional[str] = Field(default=None, alias="CATALOG_WEBHOOK_NOTIFICATION_URL")

    def key_for(self, route: str) -> Optional[str]:
        """Return the signature key for a route, honoring the fallbacks."""
        primary = {
            INVENTORY_ROUTE: self.inventory_signature_key,
            ORDERS_ROUTE: self.order_signature_key,
            CATALOG_ROUTE: self.catalog_signature_key,
        }.get(route)
        for candidate in (primary, self.square_signature_key, self.square_webhook_signature_key):
            if candidate:
                return candidate
        return None

    def notification_url_for(self, route: str) -> Optional[str]:
        return {
            INVENTORY_ROUTE: self.inventory_notification_url,
            ORDERS_ROUTE: self.order_notification_url,
            CATALOG_ROUTE: self.catalog_notification_url,
        }.get(route) or None
