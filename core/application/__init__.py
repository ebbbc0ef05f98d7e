"""Application layer - services, interfaces, DTOs and the sync context.

Services are imported from their modules; importing them here would
cycle through the infrastructure adapters that implement the interfaces.
"""

from .dtos import InventoryReconciliationReport, OrderReconciliationReport, RefreshResultDTO
from .interfaces import ICommerceClient, IEnrichmentClient, INotificationService

__all__ = [
    # DTOs
    "InventoryReconciliationReport",
    "OrderReconciliationReport",
    "RefreshResultDTO",
    # Interfaces
    "ICommerceClient",
    "IEnrichmentClient",
    "INotificationService",
]
