"""
weapon_api.dependencies - FastAPI dependency injection providers.

Provides access to the evaluator and config through FastAPI's dependency
injection system.
"""

from __future__ import annotations

from weapon_api.context import AppContext


def get_app_context() -> AppContext:
    """
    Get the global application context.

    Must be called after app startup (lifespan context).
    """
    from weapon_api.main import get_app_context as _get_ctx

    return _get_ctx()
