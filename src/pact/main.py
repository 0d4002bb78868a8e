"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import aclosing, asynccontextmanager

from fastapi import FastAPI

from pact.config import Settings, get_settings
from pact.database import close_db, get_session, init_db
from pact.gamification.router import router as gamification_router
from pact.gamification.seed import seed_badges
from pact.goals.router import router as goals_router
from pact.health.router import router as health_router
from pact.middleware import setup_middleware
from pact.notifications.router import router as notifications_router
from pact.redis_client import close_redis, init_redis

logger = logging.getLogger(__name__)


async def _seed_catalog() -> None:
    """Make sure every milestone has its badge row. Failure is logged, not fatal."""
    try:
        async with aclosing(get_session()) as sessions:
            async for db in sessions:
                await seed_badges(db)
                break
    except Exception:
        logger.warning("Badge seeding failed (tables may not exist yet)", exc_info=True)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url, create_tables=settings.create_tables_on_startup)
    await init_redis(settings.redis_url)
    await _seed_catalog()
    logger.info("Pact API %s started (%s)", settings.app_version, settings.environment)

    yield

    await close_db()
    await close_redis()


def _include_routers(app: FastAPI) -> None:
    app.include_router(health_router, tags=["Health"])
    for router in (goals_router, gamification_router, notifications_router):
        app.include_router(router)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Pact API",
        description="Accountability backend: goals, streaks, milestone badges and notifications",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    _include_routers(app)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("pact.main:app", host="0.0.0.0", port=8000, reload=False)  # noqa: S104
