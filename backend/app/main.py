"""Intake API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map IntakeError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database, session store and position catalog created in the lifespan
      and kept on app.state

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Session store is process-local: run a single worker per store instance
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.api.error_handlers import register_error_handlers
from app.api.routes import applications, health, moderation, positions
from app.config import get_settings
from app.infrastructure.database import init_db
from app.infrastructure.observability import setup_logging
from app.infrastructure.position_catalog import StaticPositionCatalog
from app.infrastructure.session_store import InMemorySessionStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    app.state.db_manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    app.state.session_store = InMemorySessionStore()
    app.state.position_catalog = StaticPositionCatalog()
    logger.info("Intake API started")
    yield
    logger.info("Intake API shutting down")
    await app.state.db_manager.dispose()


app = FastAPI(title="Intake API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(health.router)
app.include_router(positions.router)
app.include_router(applications.router)
app.include_router(moderation.router)

# Mounted after API routes so /api/v1/* takes precedence
if os.path.isdir("static"):
    app.mount("/", StaticFiles(directory="static", html=True), name="static")
