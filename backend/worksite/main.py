"""Worksite API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map WorksiteError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - The database manager and the activity log dispatcher are built once in the
      lifespan, kept on app.state, and torn down on shutdown (dispatcher first,
      so queued entries are written before the pool closes)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from worksite.api.error_handlers import register_error_handlers
from worksite.api.routes import admin, auth, health, projects, workers
from worksite.config import get_settings
from worksite.infrastructure.database import DatabaseSessionManager
from worksite.infrastructure.observability import setup_logging
from worksite.services.activity_logger import ActivityLogDispatcher

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_recycle=settings.database_pool_recycle_seconds,
    )
    dispatcher = ActivityLogDispatcher(
        db.session, max_queue_size=settings.activity_log_queue_size,
    )
    dispatcher.start()
    app.state.db = db
    app.state.activity_log = dispatcher
    logger.info("Worksite API started")
    yield
    logger.info("Worksite API shutting down")
    await dispatcher.stop()
    await db.dispose()


app = FastAPI(
    title="Worksite Management API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
    allow_credentials=True,
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(workers.router)
app.include_router(projects.router)
app.include_router(admin.router)

register_error_handlers(app)
