"""
Health check endpoints.

Used for monitoring and load balancer health checks.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import logging
import platform

from sqlalchemy.exc import SQLAlchemyError

from api.dependencies import get_sync_context
from core.application.context import SyncContext
from core.domain.value_objects import utcnow
from core.infrastructure.database.config import ping_database


logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint.

    Returns system health status.
    """
    return {
        "status": "healthy",
        "timestamp": utcnow().isoformat(),
        "service": "groove-sync",
        "version": "1.0.0",
        "python_version": platform.python_version(),
    }


@router.get("/health/ready")
async def readiness_check(context: SyncContext = Depends(get_sync_context)):
    """
    Readiness check endpoint.

    Ready once the database answers SELECT 1.
    """
    try:
        await ping_database(context.session_factory)
        database = "ok"
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"❌ Readiness check failed: {e}")
        database = "unavailable"

    ready = database == "ok"
    return JSONResponse(
        status_code=200 if ready else 503,
        content={
            "status": "ready" if ready else "not_ready",
            "timestamp": utcnow().isoformat(),
            "checks": {
                "api": "ok",
                "database": database,
                "commerce_client": "configured" if context.commerce_client else "disabled",
                "enrichment": "configured" if context.enrichment_client else "disabled",
            },
        },
    )
