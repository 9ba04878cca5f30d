"""API middleware package."""

from weapon_api.middleware.error_handling import setup_error_handlers

__all__ = ["setup_error_handlers"]
