from __future__ import annotations

from pydantic import Field

from core.settings.base import GrooveBaseSettings


SQUARE_PRODUCTION_URL = "https://connect.squareup.com"
SQUARE_SANDBOX_URL = "https://connect.squareupsandbox.com"


class SquareSettings(GrooveBaseSettings):
    """
    Commerce system (Square) API settings.
    Loaded from .env file with exact variable name matching.
    """

    access_token: str = Field(default="", alias="SQUARE_ACCESS_TOKEN")
    environment: str = Field(default="production", alias="SQUARE_ENVIRONMENT")
    location_id: str = Field(default="", alias="SQUARE_LOCATION_ID")
    api_version: str = Field(default="2024-10-17", alias="SQUARE_API_VERSION")
    timeout_seconds: float = Field(default=30.0, alias="SQUARE_TIMEOUT_SECONDS")

    @property
    def base_url(self) -> str:
        if self.environment.strip().lower() == "sandbox":
            return SQUARE_SANDBOX_URL
        return SQUARE_PRODUCTION_URL

    @property
    def configured(self) -> bool:
        return bool(self.access_token)
