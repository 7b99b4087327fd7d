"""
Error envelopes shared by all routes.

Every error body is a JSON object with a single `error` field. FastAPI's
default `{"detail": ...}` shape is replaced here, and unmatched routes
(404/405 from routing) are reported as 400.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

DATABASE_ERROR = "Database error"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def unmatched_route_message(request: Request) -> str:
    return f"Cannot {request.method} {request.url.path}"


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return error_response(status.HTTP_400_BAD_REQUEST, unmatched_route_message(request))
    return error_response(exc.status_code, str(exc.detail))


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Path/query params are plain strings, so this only fires on malformed requests.
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        f"Invalid request for {request.method} {request.url.path}",
    )


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
