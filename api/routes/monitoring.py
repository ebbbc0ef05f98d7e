"""
Monitoring endpoints.

GET runs a reconciliation check and reports; POST runs it and also
sends the alert. Checks are read-only against the mirror.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
import logging

from api.dependencies import (
    get_catalog_query_service,
    get_reconciliation_alerter,
    get_reconciliation_checker,
)
from core.application.dtos import InventoryReconciliationReport, OrderReconciliationReport
from core.application.services import (
    CatalogQueryService,
    ReconciliationAlerter,
    ReconciliationChecker,
)
from core.domain.exceptions import CommerceClientNotConfiguredError
from groove_sdk.errors import GrooveSDKError


logger = logging.getLogger(__name__)
router = APIRouter()


async def _run_inventory_check(checker: ReconciliationChecker) -> InventoryReconciliationReport:
    try:
        return await checker.check_inventory()
    except CommerceClientNotConfiguredError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except GrooveSDKError as e:
        logger.error(f"❌ Inventory check failed: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


async def _run_order_check(checker: ReconciliationChecker) -> OrderReconciliationReport:
    try:
        return await checker.check_orders()
    except CommerceClientNotConfiguredError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except GrooveSDKError as e:
        logger.error(f"❌ Order reconciliation failed: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


# =============================================================================
# INVENTORY RECONCILIATION
# =============================================================================

@router.get(
    "/inventory-sync-check",
    response_model=InventoryReconciliationReport,
    response_model_by_alias=True,
    summary="Inventory reconciliation report",
)
async def inventory_sync_check(checker: ReconciliationChecker = Depends(get_reconciliation_checker)):
    return await _run_inventory_check(checker)


@router.post(
    "/inventory-sync-check",
    response_model=InventoryReconciliationReport,
    response_model_by_alias=True,
    summary="Inventory reconciliation with alert",
)
async def inventory_sync_check_and_alert(
    checker: ReconciliationChecker = Depends(get_reconciliation_checker),
    alerter: ReconciliationAlerter = Depends(get_reconciliation_alerter),
):
    report = await _run_inventory_check(checker)
    await alerter.alert_inventory(report)
    return report


# =============================================================================
# ORDER RECONCILIATION
# =============================================================================

@router.get(
    "/order-reconciliation-check",
    response_model=OrderReconciliationReport,
    response_model_by_alias=True,
    summary="Order reconciliation report",
)
async def order_reconciliation_check(checker: ReconciliationChecker = Depends(get_reconciliation_checker)):
    return await _run_order_check(checker)


@router.post(
    "/order-reconciliation-check",
    response_model=OrderReconciliationReport,
    response_model_by_alias=True,
    summary="Order reconciliation with alert",
)
async def order_reconciliation_check_and_alert(
    checker: ReconciliationChecker = Depends(get_reconciliation_checker),
    alerter: ReconciliationAlerter = Depends(get_reconciliation_alerter),
):
    report = await _run_order_check(checker)
    await alerter.alert_orders(report)
    return report


# =============================================================================
# WEBHOOK AUDIT
# =============================================================================

@router.get(
    "/webhook-stats",
    summary="Webhook delivery counts",
    description="Audit-trail counts by status over a trailing window"
)
async def webhook_stats(
    hours: int = Query(default=24, ge=1, le=24 * 30, description="Window size in hours"),
    service: CatalogQueryService = Depends(get_catalog_query_service),
):
    return await service.webhook_stats(hours=hours)
