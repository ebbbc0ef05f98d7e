"""
Console notification service.

Used when Slack is not configured, and by tests to assert on the
alerts a sync operation produced.
"""
from typing import Any, Dict, List, Optional
import logging

from core.application.interfaces import INotificationService


logger = logging.getLogger(__name__)


class MockNotificationService(INotificationService):
    """
    Logs notifications instead of sending them and keeps every one in
    `notifications_sent`.
    """

    def __init__(self):
        self.notifications_sent: List[Dict[str, Any]] = []
        logger.info("MockNotificationService initialized (console logging)")

    async def send_error(
        self,
        correlation_id: str,
        source: str,
        error: str,
        details: Optional[str] = None
    ) -> None:
        self.notifications_sent.append({
            "type": "error",
            "correlation_id": correlation_id,
            "source": source,
            "error": error,
            "details": details,
        })
        logger.error(
            f"❌ 🔔 SYNC FAILURE [{source}] correlation={correlation_id}: {error}"
            + (f" ({details})" if details else "")
        )

    async def notify(self, message: str, severity: int = 50) -> None:
        self.notifications_sent.append({"type": "generic", "message": message, "severity": severity})

        severity_emoji = "🔴" if severity >= 80 else "🟡" if severity >= 50 else "🟢"
        logger.info(f"{severity_emoji} 🔔 NOTIFICATION (severity={severity}):\n{message}")

    def get_notifications(self, kind: Optional[str] = None) -> List[Dict[str, Any]]:
        """Sent notifications, optionally filtered by type ("error" or "generic")."""
        if kind is None:
            return list(self.notifications_sent)
        return [n for n in self.notifications_sent if n["type"] == kind]

    def clear(self) -> None:
        self.notifications_sent.clear()
