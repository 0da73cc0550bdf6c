"""Blossom API — FastAPI application entry point.

Run locally:
    uvicorn src.blossom.api.main:app --reload --port 8000
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.blossom.api.routers import analysis, health
from src.blossom.config_loader import get_engine_config, reload_engine_config
from src.blossom.settings import get_settings

# ---------- Logging ----------

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger("blossom")


# ---------- Lifespan ----------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup / shutdown hooks."""
    settings = get_settings()
    if settings.engine_config_path:
        config = reload_engine_config(settings.engine_config_path)
    else:
        config = get_engine_config()
    logger.info(
        "Starting Blossom API v%s [%s] with engine config v%s",
        settings.app_version,
        settings.environment,
        config.version,
    )
    yield
    logger.info("Blossom API shut down")


# ---------- App factory ----------

def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="Blossom API",
        description=(
            "Cycle inference, wellness scoring and lifestyle pattern stories "
            "computed from a caller-supplied window of journal entries."
        ),
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------- Health check (outside the v1 prefix, always at /health) ----------
    app.include_router(health.router)

    # ---------- API v1 routes ----------
    app.include_router(analysis.router, prefix="/api/v1")

    return app


app = create_app()
