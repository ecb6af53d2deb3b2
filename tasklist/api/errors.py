"""
Exception handlers - map application errors to HTTP responses.

Response body: {"detail": "<message>"} plus "errors" for validation
failures. 5xx details are logged, never sent to the client.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from tasklist.core.errors import AppError, ConfigError, ValidationError
from tasklist.core.validation import format_errors

logger = logging.getLogger(__name__)


INTERNAL_ERROR = "Internal server error"


def _error_response(exc: AppError) -> JSONResponse:
    content: dict = {"detail": exc.message}
    if isinstance(exc, ValidationError):
        content["errors"] = exc.errors

    headers = None
    if exc.status_code == 401:
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, ConfigError):
        logger.error(f"Configuration error on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=500, content={"detail": exc.public_message})

    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"detail": INTERNAL_ERROR})

    return _error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response(ValidationError(format_errors(exc.errors())))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": INTERNAL_ERROR})


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
