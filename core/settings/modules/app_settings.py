from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, ConfigDict

from core.infrastructure.database.config import DatabaseSettings
from core.settings.modules.discogs_settings import DiscogsSettings
from core.settings.modules.integrations_settings import SlackSettings
from core.settings.modules.square_settings import SquareSettings
from core.settings.modules.sync_settings import SyncSettings
from core.settings.modules.webhook_settings import WebhookSettings


class IntegrationsSettings(BaseModel):
    """Aggregates integrations settings as nested objects."""

    model_config = ConfigDict(extra="ignore")

    slack: SlackSettings


class AppSettings(BaseModel):
    """
    Application settings aggregator.

    `slack` is exposed directly as well as under `integrations`
    since most callers only need the one channel.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="ignore")

    database: DatabaseSettings
    square: SquareSettings
    webhooks: WebhookSettings
    discogs: DiscogsSettings
    sync: SyncSettings
    integrations: IntegrationsSettings

    @property
    def slack(self) -> SlackSettings:
        return self.integrations.slack


@lru_cache()
def get_app_settings() -> AppSettings:
    return AppSettings(
        database=DatabaseSettings(),
        square=SquareSettings(),
        webhooks=WebhookSettings(),
        discogs=DiscogsSettings(),
        sync=SyncSettings(),
        integrations=IntegrationsSettings(
            slack=SlackSettings(),
        ),
    )
