"""
weapon_api.middleware.error_handling - Global error handling for the API.

Every error leaves the service in the same envelope:
``{"error": true, "status_code": ..., "message": ..., "path": ...}``.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def _error_body(request: Request, status_code: int, message: Any, **extra: Any) -> dict:
    body = {
        "error": True,
        "status_code": status_code,
        "message": message,
        "path": str(request.url.path),
    }
    body.update(extra)
    return body


def setup_error_handlers(app: FastAPI) -> None:
    """Register global error handlers on the FastAPI app."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(request, exc.status_code, exc.detail),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report each invalid field of the request body."""
        errors: list[dict[str, Any]] = []
        for error in exc.errors():
            errors.append({
                "field": " -> ".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            })

        return JSONResponse(
            status_code=422,
            content=_error_body(request, 422, "Validation error", details=errors),
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        """Invalid call contracts (negative sockets, malformed catalog)."""
        logger.warning(f"Rejected request on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=400,
            content=_error_body(request, 400, str(exc)),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.exception(f"Unexpected error on {request.url.path}: {exc}")

        # Don't expose internal details
        return JSONResponse(
            status_code=500,
            content=_error_body(request, 500, "Internal server error"),
        )
