"""
Health check API endpoints.

Routes: GET /health (liveness), GET /health/db (database reachability)

Both routes answer 200; the body carries the verdict so load balancers
and dashboards can tell a degraded database from a dead process.

Dependencies: agribot.boundary.db
System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from agribot import __version__
from agribot.boundary.db import get_async_db, ping

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    """Liveness response."""

    status: str
    service: str = "agribot"
    version: str = __version__


class DatabaseHealthResponse(BaseModel):
    """Database connectivity check result."""

    status: str
    message: str
    latency_ms: float | None = None


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(status="healthy")


@router.get("/db", response_model=DatabaseHealthResponse)
async def health_check_db(db: AsyncSession = Depends(get_async_db)) -> DatabaseHealthResponse:
    """Probe the database with SELECT 1 and report round-trip latency."""
    try:
        latency_ms = await ping(db)
    except SQLAlchemyError as e:
        logger.error(f"{__name__}:health_check_db - {type(e).__name__}: {e}")
        return DatabaseHealthResponse(status="unhealthy", message="Database connection failed")
    return DatabaseHealthResponse(
        status="healthy",
        message="Database connection OK",
        latency_ms=latency_ms,
    )
