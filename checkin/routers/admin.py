"""Administrator endpoints: session handling, live roster and trend metrics."""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session

from checkin.core.deps import (
    clear_session_cookie,
    get_admin_session,
    require_admin,
    session_token,
    set_session_cookie,
)
from checkin.core.errors import ApiError
from checkin.core.logging import client_host, request_context
from checkin.core.observability import record_admin_login
from checkin.core.security import AdminCredentials, get_admin_credentials
from checkin.core.settings import Settings, get_settings
from checkin.db.session import get_db
from checkin.models.admin_session import AdminSession
from checkin.schemas.admin import AdminLoginRequest, AdminMeResponse, MetricPoint, RosterResponse, RosterRow
from checkin.schemas.base import DeletedResponse, OkResponse
from checkin.services import admin_sessions
from checkin.services.checkins import delete_check_in, list_check_ins
from checkin.services.metrics import daily_totals

router = APIRouter(prefix="/api/admin", tags=["admin"])
logger = logging.getLogger("security")


def _parse_day(value: Optional[str]) -> Optional[date]:
    # Blank inputs from the dashboard date pickers mean "no bound".
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "invalid_request")


def _log_auth_event(event: str, *, request: Request) -> None:
    logger.info(event, extra=request_context(request, event=event, client=client_host(request)))


@router.post("/login", response_model=OkResponse)
def admin_login(
    payload: AdminLoginRequest,
    request: Request,
    response: Response,
    previous_token: Optional[str] = Depends(session_token),
    credentials: AdminCredentials = Depends(get_admin_credentials),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> OkResponse:
    if not credentials.check(payload.username, payload.password):
        record_admin_login("failure")
        _log_auth_event("admin_login_failed", request=request)
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "bad_creds")

    # Never reuse a token issued before authentication.
    admin_sessions.destroy_session(db, previous_token)
    admin_sessions.purge_expired(db)
    token = admin_sessions.create_session(db, lifetime_minutes=settings.session_minutes)
    db.commit()

    set_session_cookie(response, token, settings)
    record_admin_login("success")
    _log_auth_event("admin_login", request=request)
    return OkResponse()


@router.post("/logout", response_model=OkResponse)
def admin_logout(
    request: Request,
    response: Response,
    token: Optional[str] = Depends(session_token),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> OkResponse:
    if admin_sessions.destroy_session(db, token):
        _log_auth_event("admin_logout", request=request)
    db.commit()
    clear_session_cookie(response, settings)
    return OkResponse()


@router.get("/me", response_model=AdminMeResponse)
def admin_me(session: Optional[AdminSession] = Depends(get_admin_session)) -> AdminMeResponse:
    return AdminMeResponse(authed=bool(session and session.is_admin))


@router.get("/logins", response_model=RosterResponse)
def list_logins(
    area: Optional[str] = Query(None),
    cluster: Optional[str] = Query(None),
    plant: Optional[str] = Query(None),
    company: Optional[str] = Query(None),
    name: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    _: AdminSession = Depends(require_admin),
) -> RosterResponse:
    """Currently checked-in visitors, newest first."""
    records = list_check_ins(
        db,
        area=area,
        cluster=cluster,
        plant=plant,
        company=company,
        name=name.strip() if name else None,
    )
    rows = [RosterRow.model_validate(record) for record in records]
    return RosterResponse(count=len(rows), rows=rows)


@router.delete("/login/{login_id}", response_model=DeletedResponse)
def delete_login(
    login_id: int,
    request: Request,
    db: Session = Depends(get_db),
    _: AdminSession = Depends(require_admin),
) -> DeletedResponse:
    deleted = delete_check_in(db, login_id)
    db.commit()
    logger.info(
        "admin_delete_login",
        extra=request_context(request, event="admin_delete_login", client=client_host(request)),
    )
    return DeletedResponse(deleted=deleted)


@router.get("/metrics", response_model=List[MetricPoint])
def login_metrics(
    start: Optional[str] = Query(None),
    end: Optional[str] = Query(None),
    area: Optional[str] = Query(None),
    cluster: Optional[str] = Query(None),
    plant: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    _: AdminSession = Depends(require_admin),
) -> List[MetricPoint]:
    """Daily check-in totals, ascending by date; gaps are omitted."""
    return daily_totals(
        db,
        start=_parse_day(start),
        end=_parse_day(end),
        area=area,
        cluster=cluster,
        plant=plant,
    )
