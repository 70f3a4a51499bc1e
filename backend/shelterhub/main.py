"""ShelterHub API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ShelterError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager
    - Outstanding announcement emails are drained before the database is disposed

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shelterhub.api.dependencies import get_outbox
from shelterhub.api.error_handlers import register_error_handlers
from shelterhub.api.routes import (
    activity_feed, admin, animals, groups, health, posts, skill_tags, statistics,
)
from shelterhub.config import get_settings
from shelterhub.infrastructure import database
from shelterhub.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("ShelterHub API started")
    yield
    logger.info("ShelterHub API shutting down")
    await get_outbox().drain()
    if database.db_manager:
        await database.db_manager.dispose()


app = FastAPI(
    title="ShelterHub API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(health.router)
app.include_router(groups.router)
app.include_router(activity_feed.router)
app.include_router(animals.router)
app.include_router(posts.router)
app.include_router(skill_tags.router)
app.include_router(admin.router)
app.include_router(statistics.router)
