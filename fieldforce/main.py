"""
Field Force Tracker — Application entry point.

This is the **only** file that assembles the app.  All business logic
lives in the `services/`, `db/`, `api/` and `core/` packages.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from fieldforce.api.api import api_router
from fieldforce.api.endpoints.auth import limiter
from fieldforce.core.config import settings
from fieldforce.core.exceptions import register_exception_handlers
from fieldforce.db.seed import seed_demo_data
from fieldforce.db.session import Database

# Ensure all models are imported so metadata.create_all can see them
import fieldforce.models  # noqa: F401

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    owned = getattr(app.state, "database", None) is None
    if owned:
        app.state.database = Database(settings.DATABASE_URL)
    database: Database = app.state.database

    await database.create_all()
    logger.info("Database tables initialised")

    if settings.SEED_DEMO_DATA:
        await seed_demo_data(database)

    logger.info("Field Force Tracker v%s started", settings.VERSION)
    yield
    if owned:
        await database.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app(database: Database | None = None) -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Field workforce check-in tracking",
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    if database is not None:
        application.state.database = database

    # CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    # Login brute-force throttling
    application.state.limiter = limiter
    application.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    application.include_router(api_router, prefix=settings.API_PREFIX)
    return application


app = create_app()
