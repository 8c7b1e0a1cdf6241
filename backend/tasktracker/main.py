"""Task Tracker API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TaskTrackerError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Storage initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Memory backend maps live on app.state for the life of the process;
      database backend creates its tables on startup if missing
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tasktracker.api.error_handlers import register_error_handlers
from tasktracker.api.routes import health, tasks
from tasktracker.config import get_settings
from tasktracker.infrastructure import database
from tasktracker.infrastructure.kv_store import memory_task_maps
from tasktracker.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    if settings.storage_backend == "memory":
        app.state.memory_maps = memory_task_maps()
    else:
        manager = database.init_db(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        await manager.create_tables()
    logger.info(f"Task Tracker API started ({settings.storage_backend} storage)")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("Task Tracker API shutting down")


app = FastAPI(
    title="Task Tracker API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(tasks.router)

register_error_handlers(app)
