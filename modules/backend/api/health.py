"""
Health Check Endpoints.

    GET /health        liveness, no dependencies touched
    GET /health/ready  readiness, 503 unless the note store answers SELECT 1
"""

import asyncio
from typing import Any

from fastapi import APIRouter, HTTPException
from sqlalchemy import text

from modules.backend.core.database import get_db_session
from modules.backend.core.logging import get_logger
from modules.backend.core.utils import elapsed_ms, monotonic_start, utc_now

router = APIRouter()
logger = get_logger(__name__)

READY_TIMEOUT_SECONDS = 5


async def check_database() -> dict[str, Any]:
    """Round-trip the note store; reports latency or the failure text."""
    start = monotonic_start()
    try:
        async for session in get_db_session():
            await session.execute(text("SELECT 1"))
            break
    except Exception as e:
        logger.warning("Database health check failed", extra={"error": str(e)})
        return {"status": "unhealthy", "error": str(e)}

    return {"status": "healthy", "latency_ms": elapsed_ms(start)}


@router.get("/health")
async def health_check() -> dict[str, str]:
    return {"status": "healthy"}


@router.get("/health/ready")
async def readiness_check() -> dict[str, Any]:
    """Readiness for load balancers; a hung database counts as unhealthy after the timeout."""
    try:
        async with asyncio.timeout(READY_TIMEOUT_SECONDS):
            database = await check_database()
    except TimeoutError:
        database = {"status": "unhealthy", "error": "timed out"}

    report = {
        "status": database["status"],
        "checks": {"database": database},
        "timestamp": utc_now().isoformat(),
    }
    if database["status"] != "healthy":
        logger.warning("Readiness check failed", extra={"checks": report["checks"]})
        raise HTTPException(status_code=503, detail=report)
    return report
