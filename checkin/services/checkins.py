"""Visitor check-in service layer.

A device holds at most one ``logins`` row. Every submission overwrites that
row and bumps the ``login_events`` counter for the day and location; both
writes run on the caller's session and become visible together on commit.
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import List, Optional

from fastapi import status
from sqlalchemy import or_
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from checkin.core.errors import ApiError
from checkin.models.checkin import CheckIn
from checkin.models.login_event import LoginEvent
from checkin.schemas.checkin import CheckInRequest

logger = logging.getLogger(__name__)

_TS_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

_CHECKIN_FIELDS = (
    "first_name",
    "last_name",
    "job_id",
    "phone",
    "company",
    "area",
    "cluster",
    "plant",
    "ts",
)


def _insert_for(db: Session, table):
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(table)
    if dialect == "sqlite":
        return sqlite.insert(table)
    raise NotImplementedError(f"upsert is not implemented for {dialect}")


def parse_ts_date(ts: str) -> date:
    """Return the calendar day of a ``yyyy-mm-dd hh:mm`` timestamp string."""
    prefix = ts[:10]
    if not _TS_DATE.match(prefix):
        raise ApiError(status.HTTP_400_BAD_REQUEST, "invalid_ts")
    try:
        return date.fromisoformat(prefix)
    except ValueError:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "invalid_ts")


def record_check_in(db: Session, payload: CheckInRequest) -> date:
    """Upsert the device's check-in and count the event for its day/location."""
    ts_date = parse_ts_date(payload.ts)
    values = payload.model_dump()

    checkins = CheckIn.__table__
    upsert = _insert_for(db, checkins).values(**values)
    upsert = upsert.on_conflict_do_update(
        index_elements=["device_id"],
        set_={name: upsert.excluded[name] for name in _CHECKIN_FIELDS},
    )
    db.execute(upsert)

    events = LoginEvent.__table__
    bump = _insert_for(db, events).values(
        ts_date=ts_date,
        area=payload.area,
        cluster=payload.cluster,
        plant=payload.plant,
        count=1,
    )
    bump = bump.on_conflict_do_update(
        index_elements=["ts_date", "area", "cluster", "plant"],
        set_={"count": events.c.count + 1},
    )
    db.execute(bump)

    logger.info(
        "check_in",
        extra={"event": "check_in", "device_id": payload.device_id},
    )
    return ts_date


def get_check_in(db: Session, device_id: str) -> Optional[CheckIn]:
    return db.query(CheckIn).filter(CheckIn.device_id == device_id).first()


def check_out(db: Session, device_id: str) -> int:
    """Remove the device's check-in. Returns the number of rows deleted."""
    deleted = (
        db.query(CheckIn)
        .filter(CheckIn.device_id == device_id)
        .delete(synchronize_session=False)
    )
    logger.info(
        "check_out",
        extra={"event": "check_out", "device_id": device_id},
    )
    return deleted


def delete_check_in(db: Session, login_id: int) -> int:
    return (
        db.query(CheckIn)
        .filter(CheckIn.id == login_id)
        .delete(synchronize_session=False)
    )


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def list_check_ins(
    db: Session,
    *,
    area: Optional[str] = None,
    cluster: Optional[str] = None,
    plant: Optional[str] = None,
    company: Optional[str] = None,
    name: Optional[str] = None,
) -> List[CheckIn]:
    """Active check-ins matching every given filter, newest first."""
    query = db.query(CheckIn)

    for column, value in (
        (CheckIn.area, area),
        (CheckIn.cluster, cluster),
        (CheckIn.plant, plant),
        (CheckIn.company, company),
    ):
        if value:
            query = query.filter(column == value)

    if name:
        pattern = f"%{_escape_like(name)}%"
        query = query.filter(
            or_(
                CheckIn.first_name.ilike(pattern, escape="\\"),
                CheckIn.last_name.ilike(pattern, escape="\\"),
            )
        )

    return query.order_by(CheckIn.ts.desc(), CheckIn.id.desc()).all()


def count_check_ins(db: Session) -> int:
    return db.query(CheckIn).count()
