"""
Global exception handlers.

Every ``CatalogError`` raised by a service becomes a JSON body of the
form ``{"error": {"code": ..., "message": ...}}`` with the status code
the error class declares.  Request validation failures detected by
FastAPI itself use the same envelope with ``VALIDATION_FAILED``.
Client errors are logged as warnings, store failures as errors.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.errors import CatalogError, ValidationFailed

logger = logging.getLogger(__name__)


def _describe(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        # Drop the leading "body"/"query"/"path" marker from the location
        location = ".".join(str(part) for part in error.get("loc", ())[1:])
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request"


def register_error_handlers(app: FastAPI) -> None:
    """Register the catalog error handlers on the FastAPI app."""

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
        if exc.http_status >= 500:
            logger.error("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
        else:
            logger.warning("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        error = ValidationFailed(_describe(exc))
        logger.warning("%s on %s %s: %s", error.code, request.method, request.url.path, error.message)
        return JSONResponse(status_code=error.http_status, content=error.to_response())
