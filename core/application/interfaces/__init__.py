"""Application layer interfaces."""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from core.domain.entities import ExternalProduct, OrderSnapshot, ReleaseMetadata


class ICommerceClient(ABC):
    """
    Interface for the external commerce system (source of truth).

    Every method is a read-only pull; the sync engine never writes
    back to the commerce system.
    """

    @abstractmethod
    async def fetch_catalog(self) -> List[ExternalProduct]:
        """
        Pull the full catalog with current stock.

        Returns:
            One ExternalProduct per live catalog item, with one stock
            count per variation and location and stock_level their sum
        """
        pass

    @abstractmethod
    async def fetch_stock_levels(self, object_ids: Sequence[str]) -> Dict[str, int]:
        """
        Current in-stock quantity per catalog object id.

        Args:
            object_ids: Item or variation ids to count

        Returns:
            Mapping of object id to quantity; ids without a count are absent
        """
        pass

    @abstractmethod
    async def fetch_recent_orders(self, created_after: datetime) -> List[OrderSnapshot]:
        """
        Pull completed orders created after a timestamp.

        Args:
            created_after: Lower bound on order creation time (UTC)

        Returns:
            Order snapshots, newest first
        """
        pass

    @abstractmethod
    async def fetch_order(self, order_id: str) -> Optional[OrderSnapshot]:
        """
        Pull one order by its commerce-system id.

        Returns:
            OrderSnapshot, or None if the order does not exist
        """
        pass


class IEnrichmentClient(ABC):
    """
    Interface for release metadata lookup.

    Implementations are expected to route every outbound call through
    the shared RateLimiter.
    """

    @abstractmethod
    async def find_release(self, query: str) -> Optional[ReleaseMetadata]:
        """
        Search for a release and fetch the best match.

        Args:
            query: Free-text search (usually the product name)

        Returns:
            ReleaseMetadata of the first match, or None if nothing matched
        """
        pass


class INotificationService(ABC):
    """
    Interface for notification service operations.

    This interface defines the contract for sending notifications,
    allowing different implementations (Slack, mock, etc.)
    """

    @abstractmethod
    async def send_error(
        self,
        correlation_id: str,
        source: str,
        error: str,
        details: Optional[str] = None
    ) -> None:
        """
        Send error notification.

        Args:
            correlation_id: Correlation id of the failed request
            source: Where the failure happened (e.g. "webhook:orders")
            error: Error message
            details: Optional error details
        """
        pass

    async def notify(self, message: str, severity: int = 50) -> None:
        """
        Send a generic notification message.

        Args:
            message: Notification message
            severity: Severity level (0-100, higher = more critical)
        """
        # Default implementation - can be overridden
        pass


__all__ = ["ICommerceClient", "IEnrichmentClient", "INotificationService"]
