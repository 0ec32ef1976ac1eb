"""
Prometheus instrumentation for the check-in API.

This module sets up:
- request/latency/exception counters for every HTTP request
- check-in, check-out and admin login counters
- the ``/metrics`` endpoint handler
"""

from __future__ import annotations

import re
import time

from fastapi import Request, Response
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware


http_requests_total = Counter(
    "http_server_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"]
)

http_request_duration_seconds = Histogram(
    "http_server_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

http_exceptions_total = Counter(
    "http_server_exceptions_total",
    "Total unhandled exceptions",
    ["method", "path", "exception_type"]
)

checkin_events_total = Counter(
    "checkin_events_total",
    "Visitor check-in and check-out events",
    ["kind"]
)

admin_logins_total = Counter(
    "checkin_admin_logins_total",
    "Administrator login attempts",
    ["outcome"]
)

checkin_active_sessions = Gauge(
    "checkin_active_sessions",
    "Visitors currently checked in (sampled by /readyz)"
)

_NUMERIC_SEGMENT = re.compile(r"/\d+")


def record_checkin_event(kind: str) -> None:
    checkin_events_total.labels(kind=kind).inc()


def record_admin_login(outcome: str) -> None:
    admin_logins_total.labels(outcome=outcome).inc()


def update_active_sessions(count: int) -> None:
    checkin_active_sessions.set(count)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware to collect Prometheus metrics for all requests."""

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path == "/metrics":
            return await call_next(request)

        method = request.method
        path = self._normalize_path(request.url.path)
        status_code = 500
        started = time.perf_counter()
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        except Exception as exc:
            http_exceptions_total.labels(method=method, path=path, exception_type=type(exc).__name__).inc()
            raise
        finally:
            http_requests_total.labels(method=method, path=path, status=status_code).inc()
            http_request_duration_seconds.labels(method=method, path=path).observe(time.perf_counter() - started)

    def _normalize_path(self, path: str) -> str:
        """Replace numeric IDs in path with placeholder to reduce cardinality."""
        normalized = _NUMERIC_SEGMENT.sub("/{id}", path)
        if not normalized.startswith("/api/") and normalized not in ("/health", "/readyz", "/Qadmin"):
            # Page routes fall through to the visitor form; collapse them.
            return "/{page}"
        parts = normalized.split("/")[:5]
        return "/".join(parts)


async def metrics_endpoint(request: Request) -> Response:
    """Prometheus metrics endpoint handler."""
    return PlainTextResponse(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )
