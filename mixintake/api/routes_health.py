"""
Health check endpoints.

- Basic health status
- Row store connectivity
- Kubernetes-style readiness / liveness probes
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status

from mixintake.api.deps import get_row_store
from mixintake.core.config import get_settings
from mixintake.services.row_store import RowStore

router = APIRouter()

SERVICE_NAME = "mixintake-api"
SERVICE_VERSION = "1.0.0"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get("", summary="Basic Health Check")
@router.get("/", summary="Basic Health Check")
async def health_check() -> Dict[str, Any]:
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "timestamp": _now(),
        "environment": get_settings().environment,
    }


@router.get("/detailed", summary="Detailed Health Check")
async def detailed_health_check(store: RowStore = Depends(get_row_store)) -> Dict[str, Any]:
    """
    Health check including row store connectivity and table configuration.

    Returns 503 when the row store cannot be reached.
    """
    settings = get_settings()
    health_data: Dict[str, Any] = {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "timestamp": _now(),
        "environment": settings.environment,
        "checks": {},
    }

    if await store.ping():
        health_data["checks"]["row_store"] = {"status": "healthy", "message": "Row store reachable"}
    else:
        health_data["checks"]["row_store"] = {"status": "unhealthy", "message": "Row store unreachable"}
        health_data["status"] = "unhealthy"

    tables = [settings.sheet_kgm3, settings.sheet_ratio, settings.sheet_admixtures, settings.sheet_scms]
    if len(set(tables)) != len(tables):
        health_data["checks"]["configuration"] = {
            "status": "degraded",
            "message": "Table names must be distinct",
        }
        if health_data["status"] == "healthy":
            health_data["status"] = "degraded"
    else:
        health_data["checks"]["configuration"] = {"status": "healthy", "tables": tables}

    if health_data["status"] == "unhealthy":
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=health_data)
    return health_data


@router.get("/ready", summary="Readiness Check")
async def readiness_check(store: RowStore = Depends(get_row_store)) -> Dict[str, str]:
    if not await store.ping():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"status": "not_ready", "message": "Row store unreachable"},
        )
    return {"status": "ready", "message": "Service is ready to accept traffic"}


@router.get("/live", summary="Liveness Check")
async def liveness_check() -> Dict[str, str]:
    return {"status": "alive", "message": "Service is running"}
