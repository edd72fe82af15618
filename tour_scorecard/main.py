"""Tour Scorecard API - FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ScorecardError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database and remote course search initialized on startup via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Tables created on startup for local SQLite play; hosted databases run alembic
    - Remote course search only wired when an API key is configured
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tour_scorecard.api.error_handlers import register_error_handlers
from tour_scorecard.api.routes import courses, games, health, scorecards
from tour_scorecard.config import get_settings
from tour_scorecard.infrastructure.course_search_client import (
    CourseSearchCache, close_course_search, init_course_search,
)
from tour_scorecard.infrastructure.database import init_db
from tour_scorecard.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.database_url.startswith("sqlite"):
        await manager.create_tables()
    if settings.course_search_api_key:
        init_course_search(
            settings.course_search_url,
            settings.course_search_api_key,
            CourseSearchCache(
                settings.course_search_cache_ttl_seconds,
                settings.course_search_cache_max_entries,
            ),
            max_retries=settings.course_search_max_retries,
            base_delay_ms=settings.course_search_base_delay_ms,
            max_delay_ms=settings.course_search_max_delay_ms,
            timeout_seconds=settings.course_search_timeout_seconds,
        )
    logger.info("Tour Scorecard API started")
    yield
    await close_course_search()
    await manager.engine.dispose()
    logger.info("Tour Scorecard API shutting down")


app = FastAPI(
    title="Tour Scorecard API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(games.router)
app.include_router(courses.router)
app.include_router(scorecards.router)

register_error_handlers(app)
