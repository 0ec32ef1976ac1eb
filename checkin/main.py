from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from checkin.core.errors import register_error_handlers
from checkin.core.headers import NoStoreMiddleware, SecurityHeadersMiddleware
from checkin.core.logging import RequestLoggingMiddleware, configure_logging
from checkin.core.observability import PrometheusMiddleware, metrics_endpoint
from checkin.core.security import get_admin_credentials
from checkin.core.settings import settings
from checkin.core.taxonomy import get_taxonomy
from checkin.db.session import create_tables
from checkin.routers import admin, health, pages, public

configure_logging(level=settings.log_level)
logger = logging.getLogger(__name__)

if settings.is_production and settings.admin_pass == "changeme":
    raise RuntimeError("ADMIN_PASS must be set in production")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_tables:
        create_tables()
    # Hash the admin password and load the taxonomy once, before serving.
    get_admin_credentials()
    get_taxonomy()
    logger.info("startup_complete", extra={"event": "startup_complete"})
    yield


app = FastAPI(title=settings.project_name, version=settings.project_version, lifespan=lifespan)

register_error_handlers(app)

app.add_middleware(NoStoreMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(PrometheusMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

app.add_api_route("/metrics", metrics_endpoint, methods=["GET"], tags=["observability"], include_in_schema=False)

app.include_router(health.router)
app.include_router(public.router)
app.include_router(admin.router)
app.mount("/assets", StaticFiles(directory=pages.STATIC_DIR), name="assets")
# Catch-all visitor form route; must stay last.
app.include_router(pages.router)
