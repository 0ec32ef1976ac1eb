"""Daily check-in totals for the admin trend chart."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from checkin.models.login_event import LoginEvent
from checkin.schemas.admin import MetricPoint


def daily_totals(
    db: Session,
    *,
    start: Optional[date] = None,
    end: Optional[date] = None,
    area: Optional[str] = None,
    cluster: Optional[str] = None,
    plant: Optional[str] = None,
) -> List[MetricPoint]:
    """Sum counters per day across matching locations, oldest day first.

    Days without events are absent rather than zero-filled.
    """
    total = func.sum(LoginEvent.count).label("count")
    query = db.query(LoginEvent.ts_date, total)

    if start:
        query = query.filter(LoginEvent.ts_date >= start)
    if end:
        query = query.filter(LoginEvent.ts_date <= end)
    for column, value in (
        (LoginEvent.area, area),
        (LoginEvent.cluster, cluster),
        (LoginEvent.plant, plant),
    ):
        if value:
            query = query.filter(column == value)

    rows = query.group_by(LoginEvent.ts_date).order_by(LoginEvent.ts_date).all()
    return [MetricPoint(date=day, count=int(count or 0)) for day, count in rows]
