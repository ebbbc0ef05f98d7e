# core/settings/base.py
from pydantic_settings import BaseSettings, SettingsConfigDict


class GrooveBaseSettings(BaseSettings):
    """
    Base class for every settings module.

    Fields declare their exact environment variable via `alias`.
    Every field has a default so the service boots with an empty
    environment; integrations without credentials disable themselves.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )
