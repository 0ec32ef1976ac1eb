from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request, Response
from sqlalchemy.orm import Session

from checkin.core.errors import unauthorized
from checkin.core.settings import Settings, get_settings
from checkin.db.session import get_db
from checkin.models.admin_session import AdminSession
from checkin.services.admin_sessions import resolve_session


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.session_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        settings.session_cookie_name,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )


def session_token(request: Request, settings: Settings = Depends(get_settings)) -> Optional[str]:
    return request.cookies.get(settings.session_cookie_name)


def get_admin_session(
    request: Request,
    response: Response,
    token: Optional[str] = Depends(session_token),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> Optional[AdminSession]:
    """Look up the caller's admin session, sliding its expiry on every hit."""
    session = resolve_session(db, token, lifetime_minutes=settings.session_minutes)
    if session is None:
        return None
    db.commit()
    set_session_cookie(response, token, settings)
    request.state.admin = session.is_admin
    return session


def require_admin(session: Optional[AdminSession] = Depends(get_admin_session)) -> AdminSession:
    if session is None or not session.is_admin:
        raise unauthorized()
    return session
