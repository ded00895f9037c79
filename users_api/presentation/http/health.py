"""Liveness, readiness and health probes."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from users_api.config import Settings, get_settings
from users_api.infrastructure.database import get_db
from users_api.infrastructure.telemetry import get_logger

logger = get_logger(__name__)
router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    version: str
    environment: str
    timestamp: datetime


class ReadinessResponse(BaseModel):
    ready: bool
    checks: dict[str, bool]


@router.get("/health", response_model=HealthResponse)
async def health(settings: Settings = Depends(get_settings)) -> HealthResponse:
    """Report build and environment without touching the identity store."""
    return HealthResponse(
        status="healthy",
        version=settings.version,
        environment=settings.environment,
        timestamp=datetime.now(UTC),
    )


@router.get("/ready", response_model=ReadinessResponse)
async def ready(db: AsyncSession = Depends(get_db)) -> ReadinessResponse:
    """Report whether the identity store answers a trivial query."""
    try:
        await db.execute(text("SELECT 1"))
        database_ok = True
    except SQLAlchemyError:
        logger.warning("Identity store not reachable", exc_info=True)
        database_ok = False

    return ReadinessResponse(ready=database_ok, checks={"database": database_ok})


@router.get("/live")
async def live() -> dict[str, str]:
    return {"status": "alive"}
