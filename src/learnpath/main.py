"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from learnpath.config import get_settings
from learnpath.dashboard.router import router as dashboard_router
from learnpath.database import close_db, get_session, init_db
from learnpath.gamification.router import router as gamification_router
from learnpath.gamification.seed import seed_achievements
from learnpath.health.router import router as health_router
from learnpath.middleware import setup_middleware
from learnpath.recommendations.router import router as recommendations_router
from learnpath.redis_client import close_redis, init_redis
from learnpath.tasks.router import router as tasks_router
from learnpath.users.router import router as users_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    # An empty LP_REDIS_URL disables event broadcast
    if settings.redis_url:
        await init_redis(settings.redis_url)

    # Seed achievement definitions (no-op when already present)
    try:
        async for db in get_session():
            await seed_achievements(db)
            break
    except Exception:
        logger.warning("Achievement seeding failed (tables may not exist yet)", exc_info=True)

    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="LearnPath API",
        description="Learning tracker API: tasks, points, streaks, achievements and recommendations",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(users_router)
    app.include_router(tasks_router)
    app.include_router(gamification_router)
    app.include_router(recommendations_router)
    app.include_router(dashboard_router)

    return app


app = create_app()
