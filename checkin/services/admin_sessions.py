"""Database-backed administrator sessions.

The browser only ever holds a random token; the database stores its SHA-256
hash, so every worker sees the same sessions and logout takes effect
everywhere at once.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from checkin.core.security import generate_session_token, hash_session_token
from checkin.models.admin_session import AdminSession


def _now() -> datetime:
    return datetime.now(timezone.utc)


def create_session(db: Session, *, lifetime_minutes: int) -> str:
    """Start an elevated session. Returns the raw token for the cookie."""
    token = generate_session_token()
    now = _now()
    db.add(
        AdminSession(
            token_hash=hash_session_token(token),
            is_admin=True,
            created_at=now,
            expires_at=now + timedelta(minutes=lifetime_minutes),
        )
    )
    db.flush()
    return token


def resolve_session(db: Session, token: Optional[str], *, lifetime_minutes: int) -> Optional[AdminSession]:
    """Return the live session for *token* and push its expiry forward."""
    if not token:
        return None
    now = _now()
    session = (
        db.query(AdminSession)
        .filter(
            AdminSession.token_hash == hash_session_token(token),
            AdminSession.expires_at > now,
        )
        .first()
    )
    if session is None:
        return None
    session.expires_at = now + timedelta(minutes=lifetime_minutes)
    db.flush()
    return session


def destroy_session(db: Session, token: Optional[str]) -> int:
    if not token:
        return 0
    return (
        db.query(AdminSession)
        .filter(AdminSession.token_hash == hash_session_token(token))
        .delete(synchronize_session=False)
    )


def purge_expired(db: Session) -> int:
    """Remove expired sessions. Returns number of rows deleted."""
    return (
        db.query(AdminSession)
        .filter(AdminSession.expires_at <= _now())
        .delete(synchronize_session=False)
    )
