"""
Unit of Work Pattern Implementation.

Manages database transactions and repository lifecycle.
"""
from typing import Optional
import logging
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.infrastructure.database.repositories import (
    AuditLog,
    CacheStore,
    CatalogMirror,
    InventoryLedger,
    OrderMirror,
)


logger = logging.getLogger(__name__)


class SyncUnitOfWork:
    """
    Unit of Work over the mirror.

    Opens a session from the factory, exposes the repositories over
    that session and rolls back if the block raises. Nothing is
    committed unless commit() is called.

    Usage:
        async with SyncUnitOfWork(session_factory) as uow:
            await uow.catalog.upsert_item(item)
            await uow.audit.record(...)
            await uow.commit()
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        """
        Initialize Unit of Work.

        Args:
            session_factory: Factory producing async sessions
        """
        self.session_factory = session_factory
        self.session: Optional[AsyncSession] = None
        self._catalog: Optional[CatalogMirror] = None
        self._orders: Optional[OrderMirror] = None
        self._inventory: Optional[InventoryLedger] = None
        self._cache: Optional[CacheStore] = None
        self._audit: Optional[AuditLog] = None

    async def __aenter__(self):
        """Open a session."""
        self.session = self.session_factory()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """
        Exit async context.

        Rolls back transaction if exception occurred, then closes
        the session.
        """
        try:
            if exc_type is not None:
                logger.error(f"Transaction failed: {exc_val}")
                await self.rollback()
        finally:
            await self.session.close()
            self.session = None

    def _require_session(self) -> AsyncSession:
        if self.session is None:
            raise RuntimeError("SyncUnitOfWork used outside of 'async with'")
        return self.session

    @property
    def catalog(self) -> CatalogMirror:
        if self._catalog is None:
            self._catalog = CatalogMirror(self._require_session())
        return self._catalog

    @property
    def orders(self) -> OrderMirror:
        if self._orders is None:
            self._orders = OrderMirror(self._require_session(), catalog=self.catalog)
        return self._orders

    @property
    def inventory(self) -> InventoryLedger:
        if self._inventory is None:
            self._inventory = InventoryLedger(self._require_session())
        return self._inventory

    @property
    def cache(self) -> CacheStore:
        if self._cache is None:
            self._cache = CacheStore(self._require_session())
        return self._cache

    @property
    def audit(self) -> AuditLog:
        if self._audit is None:
            self._audit = AuditLog(self._require_session())
        return self._audit

    async def commit(self):
        """Commit transaction."""
        try:
            await self._require_session().commit()
            logger.debug("✅ Transaction committed")
        except Exception as e:
            logger.error(f"❌ Commit failed: {e}")
            await self.rollback()
            raise

    async def rollback(self):
        """Rollback transaction."""
        await self._require_session().rollback()
        logger.warning("Transaction rolled back")
