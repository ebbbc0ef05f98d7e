"""
Webhook Audit Log Repository.

One row per delivery outcome, used by reconciliation and by
failure-rate dashboards.
"""
from datetime import datetime
from typing import Dict, List, Optional
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.enums import IngestionStatus
from core.infrastructure.database.models import WebhookEventModel


logger = logging.getLogger(__name__)

MAX_DETAIL_LENGTH = 2000


class AuditLog:
    """Append-only audit trail for webhook deliveries."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def record(
        self,
        route: str,
        correlation_id: str,
        status: IngestionStatus,
        event_type: Optional[str] = None,
        event_id: Optional[str] = None,
        detail: Optional[str] = None,
    ) -> None:
        if detail and len(detail) > MAX_DETAIL_LENGTH:
            detail = detail[:MAX_DETAIL_LENGTH]
        self.session.add(
            WebhookEventModel(
                route=route,
                correlation_id=correlation_id,
                status=IngestionStatus(status).value,
                event_type=event_type,
                event_id=event_id,
                detail=detail,
            )
        )
        await self.session.flush()

    async def recent(self, limit: int = 50) -> List[WebhookEventModel]:
        result = await self.session.execute(
            select(WebhookEventModel)
            .order_by(WebhookEventModel.received_at.desc(), WebhookEventModel.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count_by_status(self, since: Optional[datetime] = None) -> Dict[str, int]:
        query = select(WebhookEventModel.status, func.count(WebhookEventModel.id))
        if since is not None:
            query = query.where(WebhookEventModel.received_at >= since)
        result = await self.session.execute(query.group_by(WebhookEventModel.status))
        return {status: count for status, count in result.all()}
