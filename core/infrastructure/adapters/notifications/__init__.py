"""Notification adapters.

Keep this package import-light: avoid importing network-backed implementations
at module import time (e.g., aiohttp-based adapters). Import concrete services
directly from their modules when needed.
"""
from core.application.interfaces import INotificationService
from core.settings.modules.integrations_settings import SlackSettings

import logging


logger = logging.getLogger(__name__)


def build_notification_service(settings: SlackSettings) -> INotificationService:
    """Slack when enabled and configured, console mock otherwise."""
    if settings.enabled and settings.webhook_url:
        from core.infrastructure.adapters.notifications.slack_notification_service import (
            SlackNotificationService,
        )
        return SlackNotificationService(settings)

    if settings.enabled:
        logger.warning("⚠️ Slack enabled but SLACK_WEBHOOK_URL is empty, using console notifications")

    from core.infrastructure.adapters.notifications.mock_notification_service import (
        MockNotificationService,
    )
    return MockNotificationService()


__all__ = ["build_notification_service"]
