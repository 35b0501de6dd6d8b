"""farmdata API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map FarmDataError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py; this module only wires the app
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from farmdata.api.error_handlers import register_error_handlers
from farmdata.api.routes import (
    farms, health, land, long_period, policies, populations, productions,
    short_period, simulations, synthetic_populations,
)
from farmdata.config import get_settings
from farmdata.infrastructure import database
from farmdata.infrastructure.database import init_db
from farmdata.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("farmdata API started")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("farmdata API shutting down")


app = FastAPI(title="farmdata API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(populations.router)
app.include_router(farms.router)
app.include_router(productions.router)
app.include_router(policies.router)
app.include_router(land.router)
app.include_router(synthetic_populations.router)
app.include_router(simulations.router)
app.include_router(short_period.router)
app.include_router(long_period.router)

register_error_handlers(app)
