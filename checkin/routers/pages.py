"""HTML entry points for the visitor form and the admin dashboard."""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, status
from fastapi.responses import FileResponse

from checkin.core.errors import ApiError

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"

ANY_METHOD = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

router = APIRouter(tags=["pages"], include_in_schema=False)


@router.get("/Qadmin")
def admin_dashboard() -> FileResponse:
    return FileResponse(STATIC_DIR / "admin.html")


@router.api_route("/api", methods=ANY_METHOD)
@router.api_route("/api/{rest:path}", methods=ANY_METHOD)
def unknown_api_path() -> None:
    raise ApiError(status.HTTP_404_NOT_FOUND, "not_found")


@router.get("/{full_path:path}")
def visitor_form(full_path: str) -> FileResponse:
    return FileResponse(STATIC_DIR / "index.html")
