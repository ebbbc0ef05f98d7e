from __future__ import annotations

from decimal import Decimal

from pydantic import Field

from core.settings.base import GrooveBaseSettings


class SyncSettings(GrooveBaseSettings):
    """Cache namespace and reconciliation tuning."""

    cache_namespace: str = Field(default="spiralgroove", alias="GROOVE_CACHE_NAMESPACE")
    order_lookback_days: int = Field(default=7, ge=1, alias="GROOVE_ORDER_LOOKBACK_DAYS")
    order_propagation_minutes: int = Field(default=15, ge=0, alias="GROOVE_ORDER_PROPAGATION_MINUTES")
    price_tolerance: Decimal = Field(default=Decimal("0.01"), alias="GROOVE_PRICE_TOLERANCE")
    enrich_on_catalog_events: bool = Field(default=True, alias="GROOVE_ENRICH_ON_CATALOG_EVENTS")
    alert_max_findings: int = Field(default=20, ge=1, alias="GROOVE_ALERT_MAX_FINDINGS")

    @property
    def cache_key(self) -> str:
        return f"square:products:{self.cache_namespace}"
