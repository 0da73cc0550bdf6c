"""Health check endpoint."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter

from src.blossom.config_loader import get_engine_config
from src.blossom.settings import get_settings

router = APIRouter(tags=["system"])
logger = logging.getLogger("blossom.health")


@router.get("/health")
async def health_check() -> dict:
    """Liveness check. Returns 200 if the API process is up.

    Also reports which engine config version is active.
    """
    settings = get_settings()
    config_version = get_engine_config().version
    logger.debug("Health check: engine config v%s", config_version)
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
        "engine_config": config_version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
