"""
Health check endpoints for the application.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import Response

from campusgig.api.dependencies import HealthCheckerDep
from campusgig.config.logging import get_logger
from campusgig.infrastructure.monitoring.metrics import (
    get_metrics,
    get_metrics_content_type,
)

logger = get_logger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("")
async def health_check(health_checker: HealthCheckerDep) -> Dict[str, Any]:
    """Basic health check endpoint."""
    is_healthy = await health_checker.check_readiness()
    return {
        "status": "healthy" if is_healthy else "unhealthy",
        "timestamp": utc_timestamp(),
    }


@router.get("/ready")
async def readiness_check(health_checker: HealthCheckerDep) -> Dict[str, Any]:
    """Readiness check for orchestrators."""
    if not await health_checker.check_readiness():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not ready",
        )
    return {"status": "ready", "timestamp": utc_timestamp()}


@router.get("/live")
async def liveness_check() -> Dict[str, Any]:
    return {"status": "alive", "timestamp": utc_timestamp()}


@router.get("/detailed")
async def detailed_health_check(health_checker: HealthCheckerDep) -> Dict[str, Any]:
    """Detailed health check with all components."""
    return {
        "status": "success",
        "data": await health_checker.check_all_components(),
        "timestamp": utc_timestamp(),
    }


@router.get("/metrics")
async def prometheus_metrics(request: Request) -> Response:
    """Prometheus metrics endpoint."""
    if not request.app.state.settings.ENABLE_METRICS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Metrics are disabled"
        )
    logger.debug("Prometheus metrics requested")
    return Response(content=get_metrics(), media_type=get_metrics_content_type())
