from __future__ import annotations

from pydantic import Field

from core.settings.base import GrooveBaseSettings


class DiscogsSettings(GrooveBaseSettings):
    """
    Metadata enrichment (Discogs) settings.

    The vendor allows 60 authenticated requests per minute; the
    default stays below that.
    """

    enabled: bool = Field(default=False, alias="DISCOGS_ENABLED")
    user_token: str = Field(default="", alias="DISCOGS_USER_TOKEN")
    user_agent: str = Field(default="SpiralGrooveRecords/1.0", alias="DISCOGS_USER_AGENT")
    requests_per_minute: int = Field(default=50, gt=0, alias="DISCOGS_REQUESTS_PER_MINUTE")
    timeout_seconds: float = Field(default=15.0, alias="DISCOGS_TIMEOUT_SECONDS")

    @property
    def configured(self) -> bool:
        return self.enabled and bool(self.user_token)
