"""FastAPI application factory."""

import asyncio
import contextlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from satslab.catalog.router import router as catalog_router
from satslab.config import Settings, get_settings
from satslab.database import close_db, init_db
from satslab.explorer.client import ExplorerClient
from satslab.health.router import router as health_router
from satslab.learning.hints import HintPolicy
from satslab.middleware import setup_middleware
from satslab.progress.router import router as progress_router
from satslab.redis_client import close_redis, init_redis
from satslab.sessions.manager import SessionManager
from satslab.sessions.router import router as sessions_router
from satslab.validation.service import ValidationService

logger = structlog.get_logger()

PRUNE_INTERVAL_SECONDS = 60


async def _prune_loop(sessions: SessionManager) -> None:
    """Close idle learner sessions periodically."""
    while True:
        await asyncio.sleep(PRUNE_INTERVAL_SECONDS)
        sessions.prune_idle()


def build_services(settings: Settings) -> tuple[ExplorerClient | None, ValidationService, SessionManager]:
    """Explorer client, validator and session registry for one app instance."""
    explorer = (
        ExplorerClient(settings.explorer_base_url, timeout_seconds=settings.explorer_timeout_seconds)
        if settings.explorer_enabled
        else None
    )
    sessions = SessionManager(
        idle_timeout_seconds=settings.session_idle_timeout_seconds,
        hint_policy=HintPolicy.from_settings(settings),
    )
    return explorer, ValidationService(explorer), sessions


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    if settings.redis_enabled:
        await init_redis(settings.redis_url)

    explorer, validator, sessions = build_services(settings)
    app.state.validation_service = validator
    app.state.session_manager = sessions
    prune_task = asyncio.create_task(_prune_loop(sessions))
    logger.info("startup_complete", explorer=settings.explorer_enabled, redis=settings.redis_enabled)

    yield

    prune_task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await prune_task
    sessions.close_all()
    if explorer is not None:
        await explorer.aclose()

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="SatsLab Learning API",
        description="Guided Bitcoin learning modules with quiz, hands-on tasks and badges",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(catalog_router)
    app.include_router(sessions_router)
    app.include_router(progress_router)

    return app


app = create_app()
