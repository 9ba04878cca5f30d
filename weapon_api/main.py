"""
weapon_api.main - FastAPI application entry point.

Run with:
    uvicorn weapon_api.main:app --reload
    python -m weapon_api.main
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from weapon_api import __version__
from weapon_api.middleware import setup_error_handlers
from weapon_api.routers import health_router, weapons_router

if TYPE_CHECKING:
    from weapon_api.context import AppContext

logger = logging.getLogger(__name__)

# Global app context (initialized at startup)
_app_context: "AppContext | None" = None


def get_app_context() -> "AppContext":
    """Get the global app context. Must be called after app startup."""
    if _app_context is None:
        raise RuntimeError("App context not initialized. Server not started?")
    return _app_context


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle - startup and shutdown."""
    global _app_context

    logger.info("Starting weapon value API...")
    if _app_context is None:
        from weapon_api.context import create_app_context

        _app_context = create_app_context()
    logger.info("App context initialized successfully")

    yield

    logger.info("Shutting down weapon value API...")
    if _app_context is not None:
        _app_context.close()
        _app_context = None
    logger.info("Shutdown complete")


app = FastAPI(
    title="PoE2 Weapon Value API",
    description="DPS, rune optimization and DPS-per-price ranking for PoE2 weapon listings",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# The page adapter runs on the trade site's origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_error_handlers(app)

app.include_router(health_router, tags=["Health"])
app.include_router(weapons_router, prefix="/api/v1", tags=["Weapons"])


@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint - API info."""
    return {
        "message": "PoE2 Weapon Value API",
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "weapon_api.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
        log_level="info",
    )
