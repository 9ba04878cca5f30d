"""
weapon_api.routers.health - Health check and config endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from weapon_api import __version__
from weapon_api.context import AppContext
from weapon_api.dependencies import get_app_context
from weapon_api.models import ConfigResponse, HealthResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(
    ctx: AppContext = Depends(get_app_context),
) -> HealthResponse:
    """
    Check API health status.

    The service is degraded when the evaluator has no runes to optimize with.
    """
    services: dict[str, str] = {
        "evaluator": "available",
        "rune_catalog": f"{len(ctx.evaluator.catalog)} runes",
    }
    overall_status = "healthy" if len(ctx.evaluator.catalog) else "degraded"

    return HealthResponse(
        status=overall_status,
        version=__version__,
        services=services,
    )


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """Returns 200 if the service is alive."""
    return {"status": "alive"}


@router.get("/config", response_model=ConfigResponse)
async def get_config(
    ctx: AppContext = Depends(get_app_context),
) -> ConfigResponse:
    """Current evaluation settings and the active rune catalog."""
    config = ctx.config
    return ConfigResponse(
        fallback_socket_count=config.fallback_socket_count,
        crit_chance_pct=config.crit_chance_pct,
        crit_multiplier=config.crit_multiplier,
        round_trip_tolerance=config.round_trip_tolerance,
        top_n=config.top_n,
        runes=ctx.evaluator.catalog.to_dicts(),
    )
