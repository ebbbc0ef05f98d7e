"""
Reconciliation Alerter.

Turns reconciliation reports into human-facing notifications. The
checker never alerts by itself; callers decide when a report should
be escalated.
"""
import logging
from typing import Iterable, List

from core.application.dtos import InventoryReconciliationReport, OrderReconciliationReport
from core.application.interfaces import INotificationService


logger = logging.getLogger(__name__)

SEVERITY_MISSING_ORDERS = 80
SEVERITY_ORDER_MISMATCH = 60
SEVERITY_INVENTORY_DIVERGENCE = 60
SEVERITY_ALL_CLEAR = 20


class ReconciliationAlerter:
    """Composes Slack-style messages for reconciliation reports."""

    def __init__(self, notification_service: INotificationService, max_findings: int = 20):
        self.notification_service = notification_service
        self.max_findings = max_findings

    async def alert_inventory(self, report: InventoryReconciliationReport) -> int:
        """
        Send the inventory report.

        Returns:
            Severity the notification was sent with
        """
        if report.has_findings:
            severity = SEVERITY_INVENTORY_DIVERGENCE
            lines = [
                "🟡 *Inventory Divergence Detected*",
                f"Items checked: {report.total_checked}",
                f"Mismatches found: {report.mismatch_count}",
            ]
            lines += self._findings(
                f"• `{m.id}` {m.field}: expected {m.expected}, mirror has {m.actual}"
                for m in report.mismatches
            )
            lines.append("Action: run a full catalog refresh (POST /api/v1/cache/warm) and re-check.")
        else:
            severity = SEVERITY_ALL_CLEAR
            lines = [
                "✅ *Inventory Sync Check Passed*",
                f"Items checked: {report.total_checked}",
            ]
        if report.external_only:
            lines.append(f"Not mirrored yet: {len(report.external_only)}")
        if report.mirror_only:
            lines.append(f"Mirrored but gone from the catalog: {len(report.mirror_only)}")

        await self.notification_service.notify("\n".join(lines), severity=severity)
        logger.info(f"Inventory reconciliation alert sent (severity={severity})")
        return severity

    async def alert_orders(self, report: OrderReconciliationReport) -> int:
        """
        Send the order report. Missing orders are the highest severity
        finding: they are gaps in the financial record.

        Returns:
            Severity the notification was sent with
        """
        if report.missing_orders:
            severity = SEVERITY_MISSING_ORDERS
            title = "🔴 *Order Reconciliation Failure*"
        elif report.mismatch_count:
            severity = SEVERITY_ORDER_MISMATCH
            title = "🟡 *Order Field Mismatches*"
        else:
            severity = SEVERITY_ALL_CLEAR
            title = "✅ *Order Reconciliation Passed*"

        lines = [
            title,
            f"Orders checked (last {report.lookback_days} days): {report.total_checked}",
            f"Missing from mirror: {len(report.missing_orders)}",
            f"Field mismatches: {report.mismatch_count}",
            f"Pending (inside propagation window): {len(report.pending_orders)}",
        ]
        lines += self._findings(
            f"• missing `{o.order_number}` ({o.external_id}) amount={o.amount} created={o.created_at}"
            for o in report.missing_orders
        )
        lines += self._findings(
            f"• `{m.id}` {m.field}: expected {m.expected}, mirror has {m.actual}"
            for m in report.mismatches
        )
        if report.missing_orders:
            lines.append("Action: check the orders webhook subscription and replay the missing orders.")

        await self.notification_service.notify("\n".join(lines), severity=severity)
        logger.info(f"Order reconciliation alert sent (severity={severity})")
        return severity

    def _findings(self, entries: Iterable[str]) -> List[str]:
        entries = list(entries)
        shown = entries[:self.max_findings]
        if len(entries) > len(shown):
            shown.append(f"… and {len(entries) - len(shown)} more")
        return shown
