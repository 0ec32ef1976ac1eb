"""JSON error envelope: every failure leaves the API as ``{"error": <code>}``."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from checkin.core.logging import request_context

logger = logging.getLogger(__name__)

_STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: "bad_request",
    status.HTTP_401_UNAUTHORIZED: "unauthorized",
    status.HTTP_403_FORBIDDEN: "forbidden",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
}


class ApiError(Exception):
    """An expected failure with a stable machine-readable code."""

    def __init__(self, status_code: int, code: str) -> None:
        super().__init__(code)
        self.status_code = status_code
        self.code = code


def missing_fields() -> ApiError:
    return ApiError(status.HTTP_400_BAD_REQUEST, "missing_fields")


def unauthorized() -> ApiError:
    return ApiError(status.HTTP_401_UNAUTHORIZED, "unauthorized")


def _error(status_code: int, code: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": code})


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return _error(exc.status_code, exc.code)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = exc.detail if isinstance(exc.detail, str) and exc.detail.islower() else None
    return _error(exc.status_code, code or _STATUS_CODES.get(exc.status_code, "error"))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("invalid_request", extra=request_context(request, event="invalid_request"))
    return _error(status.HTTP_400_BAD_REQUEST, "invalid_request")


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("storage_error", exc_info=exc, extra=request_context(request, event="storage_error"))
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "db")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # Runs outside the middleware stack; the exception itself is logged by
    # RequestLoggingMiddleware on its way out.
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
