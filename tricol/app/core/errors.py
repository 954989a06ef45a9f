"""
Map domain errors to HTTP responses.

NotFound -> 404, InsufficientStock / Conflict -> 409, InvalidInput -> 400.
Response body keeps FastAPI's `detail` key so clients see one shape for
both HTTPException and domain errors.
"""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from tricol.app.core.logging import get_logger
from tricol.services.errors import (
    Conflict,
    InsufficientStock,
    InvalidInput,
    NotFound,
    TricolError,
)

logger = get_logger(__name__)

EXCEPTION_STATUS_MAP: dict[type[TricolError], int] = {
    NotFound: status.HTTP_404_NOT_FOUND,
    InsufficientStock: status.HTTP_409_CONFLICT,
    Conflict: status.HTTP_409_CONFLICT,
    InvalidInput: status.HTTP_400_BAD_REQUEST,
}


def status_for(exc: TricolError) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(TricolError)
    async def tricol_error_handler(request: Request, exc: TricolError) -> JSONResponse:
        status_code = status_for(exc)
        logger.warning(
            "request_failed",
            path=request.url.path,
            method=request.method,
            status_code=status_code,
            error=exc.code,
            message=exc.message,
        )
        return JSONResponse(
            status_code=status_code,
            content={"detail": exc.message, "error": exc.code, "details": exc.details},
        )
