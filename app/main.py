"""Vendor Empanelment API — FastAPI application factory."""


import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import Settings, settings as default_settings
from app.core.exceptions import register_exception_handlers
from app.db.base import Database
from app.middleware.request_log import RequestLogMiddleware
from app.schemas.common import HealthResponse
from app.storage.local import LocalFileStorage

# v1 routers
from app.routers.v1.applications import router as applications_v1_router
from app.routers.v1.auth import router as auth_v1_router
from app.routers.v1.official import router as official_v1_router

logger = logging.getLogger(__name__)


def _configure_logging(settings: Settings) -> None:
    """Set up structured logging for the application."""
    level = logging.DEBUG if settings.app_env == "development" else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )
    # Quiet noisy libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)
    logging.getLogger("python_multipart").setLevel(logging.WARNING)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings
    _configure_logging(settings)

    # Process-wide resources: built once here, released at shutdown
    database = Database(settings)
    storage = LocalFileStorage(settings.upload_dir)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.auto_create_schema:
            await database.create_all()
        logger.info("%s started (env=%s)", settings.app_name, settings.app_env)
        try:
            yield
        finally:
            await database.dispose()
            logger.info("Database connections closed")

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url="/docs" if settings.app_env == "development" else None,
        redoc_url="/redoc" if settings.app_env == "development" else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = database
    app.state.storage = storage

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # --- Request logging ---
    app.add_middleware(RequestLogMiddleware)

    # --- Global exception handlers ---
    register_exception_handlers(app)

    # --- v1 API routes (/api/v1/*) ---
    app.include_router(auth_v1_router, prefix="/api/v1")
    app.include_router(applications_v1_router, prefix="/api/v1")
    app.include_router(official_v1_router, prefix="/api/v1")

    # --- Health check ---
    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health():
        return HealthResponse(app=settings.app_name, env=settings.app_env)

    return app


app = create_app()
