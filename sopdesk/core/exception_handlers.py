"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain error codes
and framework exceptions to HTTP responses with a uniform
{error, message, details} body.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sopdesk.core.config import get_settings
from sopdesk.domain.exceptions import KeyFetchException, SopDeskException

logger = logging.getLogger(__name__)

_ERROR_CODE_STATUS: dict[str, int] = {
    "MISSING_CREDENTIAL": 401,
    "INVALID_CREDENTIAL": 401,
    "FORBIDDEN": 403,
    "RESOURCE_NOT_FOUND": 404,
    "CONFLICT": 409,
    "CONTENDED_WRITE": 409,
    "VALIDATION_ERROR": 400,
    "UPSTREAM_FAILURE": 502,
    "SERVICE_UNAVAILABLE": 503,
}


def status_for(exc: SopDeskException) -> int:
    return _ERROR_CODE_STATUS.get(exc.error_code, 400)


def _sopdesk_exception_handler(request: Request, exc: SopDeskException) -> JSONResponse:
    """Return JSON from SopDeskException.to_dict() with the mapped status code."""
    status = status_for(exc)
    if isinstance(exc, KeyFetchException):
        logger.error("Key fetch failure on %s %s: %s", request.method, request.url.path, exc.reason)
    elif status >= 500:
        logger.error(
            "%s on %s %s: %s", exc.error_code, request.method, request.url.path, exc.details
        )
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return JSONResponse(status_code=status, content=exc.to_dict(), headers=headers)


def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 422 with validation error details."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": jsonable_errors(exc),
        },
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Strip non-serializable context (e.g. raised ValueErrors) from pydantic errors."""
    errors = []
    for err in exc.errors():
        item = {k: v for k, v in err.items() if k in ("type", "loc", "msg")}
        errors.append(item)
    return errors


def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail, "details": {}},
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True.

    The log line carries the request id, the caller's tenant (once resolved)
    and the route's path parameters (record ids).
    """
    logger.exception(
        "Unhandled exception on %s %s (request_id=%s owner_id=%s params=%s): %s",
        request.method,
        request.url.path,
        getattr(request.state, "request_id", None),
        getattr(request.state, "owner_id", None),
        dict(request.path_params),
        exc,
    )
    detail: Any = str(exc) if get_settings().debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail, "details": {}},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Handlers: SopDeskException (and subclasses), RequestValidationError,
    StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(SopDeskException, _sopdesk_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
