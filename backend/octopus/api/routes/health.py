"""Ping & Readiness - liveness and readiness endpoints.

Invariants:
    - GET /api/v1/ping always returns {"pong": true} while the process is up
    - GET /api/v1/health/ready returns 503 if the database is unreachable
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from octopus.infrastructure import database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["health"])


@router.get("/ping", status_code=status.HTTP_200_OK)
async def ping():
    """Liveness check used by the load balancer and the mobile app."""
    return {"pong": True}


@router.get("/health/ready")
async def readiness_check():
    manager = database.db_manager
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
