"""
Slack Notification Service Implementation.

Posts sync failures and reconciliation reports to a Slack incoming
webhook as a single colored attachment.
"""
from typing import Any, Dict, List, Optional
import logging
import aiohttp

from core.application.interfaces import INotificationService
from core.settings.modules.integrations_settings import SlackSettings


logger = logging.getLogger(__name__)

CRITICAL_SEVERITY = 80
WARNING_SEVERITY = 50


def severity_color(severity: int) -> str:
    """Slack attachment color for a 0-100 severity."""
    if severity >= CRITICAL_SEVERITY:
        return "danger"
    if severity >= WARNING_SEVERITY:
        return "warning"
    return "good"


class SlackNotificationService(INotificationService):
    """
    Slack implementation of notification service.

    Delivery failures are logged and never raised: an alert that
    cannot be sent must not fail the sync operation that produced it.
    """

    def __init__(self, settings: SlackSettings):
        """
        Initialize Slack notification service.

        Args:
            settings: Slack settings with webhook URL and message prefix
        """
        self.webhook_url = settings.webhook_url
        self.prefix = settings.prefix
        self.timeout = aiohttp.ClientTimeout(total=settings.timeout_seconds)
        logger.info("SlackNotificationService initialized")

    async def send_error(
        self,
        correlation_id: str,
        source: str,
        error: str,
        details: Optional[str] = None
    ) -> None:
        """Report a failed webhook delivery or sync run."""
        fields = [
            {"title": "Source", "value": f"`{source}`", "short": True},
            {"title": "Correlation", "value": f"`{correlation_id}`", "short": True},
            {"title": "Error", "value": error, "short": False},
        ]
        if details:
            fields.append({"title": "Details", "value": details, "short": False})

        await self._post(
            self._attachment(f"{self.prefix} ❌ *Sync failure*", "danger", fields)
        )

    async def notify(self, message: str, severity: int = 50) -> None:
        """
        Send a generic notification message.

        Args:
            message: Slack mrkdwn text (reconciliation reports are multi-line)
            severity: Severity level (0-100, higher = more critical)
        """
        await self._post(
            self._attachment(f"{self.prefix} {message}", severity_color(severity))
        )

    @staticmethod
    def _attachment(text: str, color: str, fields: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
        attachment: Dict[str, Any] = {"color": color, "text": text, "mrkdwn_in": ["text", "fields"]}
        if fields:
            attachment["fields"] = fields
        return {"attachments": [attachment]}

    async def _post(self, payload: Dict[str, Any]) -> None:
        if not self.webhook_url:
            logger.warning("Slack webhook_url not configured, skipping notification")
            return

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(self.webhook_url, json=payload) as response:
                    if response.status != 200:
                        body = await response.text()
                        logger.error(f"❌ Slack webhook rejected notification: {response.status} - {body}")
                        return
            logger.info("Slack notification sent")
        except (aiohttp.ClientError, TimeoutError) as e:
            logger.error(f"❌ Failed to send Slack notification: {e}", exc_info=True)
