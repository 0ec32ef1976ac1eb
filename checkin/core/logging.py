from __future__ import annotations

import json
import logging
import sys
import time
import uuid
from datetime import datetime, timezone
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

# Attributes passed through ``extra=`` that end up in the JSON line.
LOG_FIELDS = (
    "request_id",
    "event",
    "path",
    "method",
    "status_code",
    "latency_ms",
    "admin",
    "device_id",
    "client",
)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, getattr(record, key)) for key in LOG_FIELDS if hasattr(record, key)
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())
    logging.basicConfig(level=level, handlers=[handler], force=True)
    # RequestLoggingMiddleware already writes one line per request.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def request_id_for(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def request_context(request: Request, **fields: Any) -> dict[str, Any]:
    """Standard ``extra=`` payload describing *request*, plus any *fields*."""
    context = {
        "request_id": request_id_for(request),
        "path": request.url.path,
        "method": request.method,
    }
    context.update(fields)
    return context


def client_host(request: Request) -> str | None:
    return request.client.host if request.client else None


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id, log its outcome, and flag admin 401s."""

    def __init__(self, app, logger_name: str = "request") -> None:
        super().__init__(app)
        self.logger = logging.getLogger(logger_name)
        self.security_logger = logging.getLogger("security")

    async def dispatch(self, request: Request, call_next) -> Response:
        request.state.request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        started = time.perf_counter()

        def elapsed_ms() -> float:
            return round((time.perf_counter() - started) * 1000, 2)

        try:
            response = await call_next(request)
        except Exception:
            self.logger.exception(
                "unhandled_exception",
                extra=request_context(request, latency_ms=elapsed_ms()),
            )
            raise

        self.logger.info(
            "request",
            extra=request_context(
                request,
                status_code=response.status_code,
                latency_ms=elapsed_ms(),
                admin=bool(getattr(request.state, "admin", False)),
            ),
        )
        if response.status_code == 401 and request.url.path.startswith("/api/admin"):
            self.security_logger.info(
                "unauthorized",
                extra=request_context(
                    request,
                    event="unauthorized",
                    status_code=response.status_code,
                    client=client_host(request),
                ),
            )

        response.headers["X-Request-Id"] = request.state.request_id
        return response

