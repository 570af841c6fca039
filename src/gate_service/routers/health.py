"""Health check endpoint for the Quality Gate."""
from __future__ import annotations
import asyncio
import time
import sqlite3

from fastapi import APIRouter, Request

from src.shared.models.common import HealthStatus
from src.shared.constants import VERSION, QUALITY_GATE_SERVICE_NAME

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthStatus)
async def health(request: Request) -> HealthStatus:
    """Report database connectivity, AI backend state and uptime."""

    def _check() -> HealthStatus:
        db_status = "connected"
        pool = getattr(request.app.state, "pool", None)
        if pool:
            try:
                pool.get().execute("SELECT 1")
            except (sqlite3.Error, OSError):
                db_status = "disconnected"
        else:
            db_status = "disconnected"

        start_time = getattr(request.app.state, "start_time", time.time())
        service = getattr(request.app.state, "service", None)

        return HealthStatus(
            status="healthy" if db_status == "connected" else "degraded",
            service_name=QUALITY_GATE_SERVICE_NAME,
            version=VERSION,
            database=db_status,
            uptime_seconds=time.time() - start_time,
            ai_backend="configured" if getattr(request.app.state, "ai_enabled", False) else "disabled",
            details={"checks": len(service.registry) if service is not None else 0},
        )

    return await asyncio.to_thread(_check)
