"""API routers package."""

from weapon_api.routers.health import router as health_router
from weapon_api.routers.weapons import router as weapons_router

__all__ = [
    "health_router",
    "weapons_router",
]
