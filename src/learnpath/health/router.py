"""Service health endpoints: liveness, readiness and build version.

LearnPath needs only its database to serve requests. Redis carries the
optional live events, so it is reported but never blocks readiness.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from learnpath.config import get_settings
from learnpath.database import get_session
from learnpath.redis_client import get_redis

router = APIRouter()


async def _database_status(db: AsyncSession) -> str:
    try:
        await db.execute(text("SELECT 1"))
    except Exception as exc:
        return f"error: {exc}"
    return "ok"


async def _redis_status() -> str:
    try:
        await get_redis().ping()
    except Exception as exc:
        return f"unavailable: {exc}"
    return "ok"


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}


@router.get("/ready")
async def readiness(
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict[str, object]:
    checks = {
        "database": await _database_status(db),
        "redis": await _redis_status(),
    }
    status = "ready" if checks["database"] == "ok" else "degraded"
    return {"status": status, "checks": checks}


@router.get("/version")
async def version() -> dict[str, str]:
    settings = get_settings()
    return {"version": settings.app_version, "environment": settings.environment}
