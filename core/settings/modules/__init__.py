# Settings modules
from .app_settings import AppSettings, get_app_settings, IntegrationsSettings
from .discogs_settings import DiscogsSettings
from .integrations_settings import SlackSettings
from .square_settings import SquareSettings
from .sync_settings import SyncSettings
from .webhook_settings import (
    CATALOG_ROUTE,
    INVENTORY_ROUTE,
    ORDERS_ROUTE,
    WEBHOOK_ROUTES,
    WebhookSettings,
)

__all__ = [
    "AppSettings",
    "get_app_settings",
    "IntegrationsSettings",
    "DiscogsSettings",
    "SlackSettings",
    "SquareSettings",
    "SyncSettings",
    "WebhookSettings",
    "CATALOG_ROUTE",
    "INVENTORY_ROUTE",
    "ORDERS_ROUTE",
    "WEBHOOK_ROUTES",
]
