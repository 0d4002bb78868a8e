"""Health, readiness, and version endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from pact.config import get_settings
from pact.database import get_session
from pact.gamification.badge_service import count_active_badges
from pact.gamification.milestones import STREAK_MILESTONES
from pact.redis_client import get_redis

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness: the process is up."""
    return {"status": "healthy"}


@router.get("/ready")
async def readiness(
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict[str, object]:
    """Readiness: database reachable, badge catalog seeded, Redis reachable.

    A missing Redis only degrades the service (events are dropped); goal
    completion still works.
    """
    checks: dict[str, object] = {}

    try:
        await db.execute(text("SELECT 1"))
        seeded = await count_active_badges(db)
        checks["database"] = "ok"
        checks["badge_catalog"] = (
            "ok" if seeded >= len(STREAK_MILESTONES) else f"incomplete: {seeded}/{len(STREAK_MILESTONES)}"
        )
    except Exception as exc:
        checks["database"] = f"error: {exc}"

    try:
        await get_redis().ping()
        checks["redis"] = "ok"
    except Exception as exc:
        checks["redis"] = f"error: {exc}"

    all_ok = all(v == "ok" for v in checks.values())
    return {"status": "ready" if all_ok else "degraded", "checks": checks}


@router.get("/version")
async def version() -> dict[str, object]:
    """API version, environment and the size of the milestone table."""
    settings = get_settings()
    return {
        "version": settings.app_version,
        "environment": settings.environment,
        "milestones": len(STREAK_MILESTONES),
    }
