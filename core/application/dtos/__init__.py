"""Application DTOs."""

from .catalog_dto import (
    CatalogSnapshotDTO,
    EnrichmentResultDTO,
    ItemViewDTO,
    ProductProjectionDTO,
    RefreshResultDTO,
)
from .reconciliation_dto import (
    INVENTORY_ALL_MATCH,
    INVENTORY_DIVERGENCE,
    ORDER_ALL_RECONCILED,
    ORDER_RECONCILIATION_FAILURE,
    FieldMismatchDTO,
    InventoryReconciliationReport,
    MissingOrderDTO,
    OrderReconciliationReport,
)

__all__ = [
    "INVENTORY_ALL_MATCH",
    "INVENTORY_DIVERGENCE",
    "ORDER_ALL_RECONCILED",
    "ORDER_RECONCILIATION_FAILURE",
    "CatalogSnapshotDTO",
    "EnrichmentResultDTO",
    "FieldMismatchDTO",
    "InventoryReconciliationReport",
    "ItemViewDTO",
    "MissingOrderDTO",
    "OrderReconciliationReport",
    "ProductProjectionDTO",
    "RefreshResultDTO",
]
