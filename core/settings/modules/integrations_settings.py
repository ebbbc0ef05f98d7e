from __future__ import annotations

from pydantic import Field

from core.settings.base import GrooveBaseSettings


class SlackSettings(GrooveBaseSettings):
    """
    Slack integration settings.
    Loaded from .env file with exact variable name matching.
    """

    enabled: bool = Field(default=False, alias="GROOVE_SLACK_ENABLED")
    webhook_url: str = Field(default="", alias="SLACK_WEBHOOK_URL")
    prefix: str = Field(default="[groove-sync]", alias="GROOVE_SLACK_PREFIX")
    timeout_seconds: float = Field(default=10.0, alias="GROOVE_SLACK_TIMEOUT_SECONDS")
