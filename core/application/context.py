"""
Sync context.

Process-scoped handles that used to be module globals (database
session factory, rate limiter, clients) are bundled here and passed
to every service at construction. Build it once per process; tests
build their own.
"""
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.application.interfaces import ICommerceClient, IEnrichmentClient, INotificationService
from core.domain.exceptions import CommerceClientNotConfiguredError
from core.infrastructure.concurrency import KeyedLock, RateLimiter
from core.infrastructure.database.unit_of_work import SyncUnitOfWork
from core.settings.modules.app_settings import AppSettings


@dataclass
class SyncContext:
    settings: AppSettings
    session_factory: async_sessionmaker[AsyncSession]
    commerce_client: Optional[ICommerceClient]
    notification_service: INotificationService
    rate_limiter: RateLimiter
    enrichment_client: Optional[IEnrichmentClient] = None
    order_locks: KeyedLock = field(default_factory=KeyedLock)

    def unit_of_work(self) -> SyncUnitOfWork:
        return SyncUnitOfWork(self.session_factory)

    @property
    def cache_key(self) -> str:
        return self.settings.sync.cache_key

    def require_commerce_client(self) -> ICommerceClient:
        """
        Raises:
            CommerceClientNotConfiguredError: If no commerce client is configured
        """
        if self.commerce_client is None:
            raise CommerceClientNotConfiguredError("Commerce client is not configured (set SQUARE_ACCESS_TOKEN)")
        return self.commerce_client
