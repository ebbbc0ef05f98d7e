"""
DTOs for reconciliation reports.

Serialized with camelCase keys (model_dump(by_alias=True)) because
the reports are consumed by dashboards and alerting outside Python.
"""
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


INVENTORY_DIVERGENCE = "divergence_detected"
INVENTORY_ALL_MATCH = "all_match"
ORDER_RECONCILIATION_FAILURE = "reconciliation_failure"
ORDER_ALL_RECONCILED = "all_reconciled"


class ReportModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FieldMismatchDTO(ReportModel):
    """One differing field: expected is the commerce system's value, actual the mirror's."""

    id: str = Field(..., description="Catalog item id or external order number")
    field: str = Field(..., description="Compared field (stock, name, price, totalAmount, status)")
    expected: Any = Field(None, description="Value in the commerce system")
    actual: Any = Field(None, description="Value in the mirror")


class InventoryReconciliationReport(ReportModel):
    """Result of an inventory audit."""

    status: str = Field(..., description="divergence_detected or all_match")
    checked_at: datetime
    total_checked: int = Field(0, description="Items present in both systems")
    mismatch_count: int = 0
    mismatches: List[FieldMismatchDTO] = Field(default_factory=list)
    external_only: List[str] = Field(
        default_factory=list, description="Item ids not mirrored yet"
    )
    mirror_only: List[str] = Field(
        default_factory=list, description="Mirrored item ids no longer in the commerce catalog"
    )

    @property
    def has_findings(self) -> bool:
        return self.mismatch_count > 0


class MissingOrderDTO(ReportModel):
    order_number: str
    external_id: Optional[str] = None
    amount: Optional[float] = None
    created_at: Optional[datetime] = None


class OrderReconciliationReport(ReportModel):
    """Result of an order audit over the lookback window."""

    status: str = Field(..., description="reconciliation_failure or all_reconciled")
    checked_at: datetime
    lookback_days: int
    total_checked: int = Field(0, description="External orders in the window")
    mismatch_count: int = 0
    mismatches: List[FieldMismatchDTO] = Field(default_factory=list)
    missing_orders: List[MissingOrderDTO] = Field(
        default_factory=list, description="Absent from the mirror past the propagation window"
    )
    pending_orders: List[MissingOrderDTO] = Field(
        default_factory=list, description="Absent from the mirror but still inside the propagation window"
    )

    @property
    def has_findings(self) -> bool:
        return bool(self.missing_orders) or self.mismatch_count > 0
