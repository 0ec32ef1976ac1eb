from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.orm import Session

from checkin.core.observability import update_active_sessions
from checkin.db.session import get_db
from checkin.services.checkins import count_check_ins

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


@router.get("/health")
def health() -> dict[str, bool]:
    return {"ok": True}


@router.get("/readyz")
def readiness(db: Session = Depends(get_db)) -> dict[str, str | int]:
    """Database round trip; also samples the active check-in gauge."""
    try:
        db.execute(text("SELECT 1"))
        active = count_check_ins(db)
    except Exception as exc:
        logger.error("readiness_failed", exc_info=True)
        raise HTTPException(status_code=503, detail="unavailable") from exc
    update_active_sessions(active)
    return {"status": "ok", "active_check_ins": active}
