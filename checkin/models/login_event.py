"""Per-day check-in counters for each area/cluster/plant."""

from __future__ import annotations

from datetime import date

from sqlalchemy import Date, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from checkin.db.base import Base, IDMixin, LocationMixin


class LoginEvent(IDMixin, LocationMixin, Base):
    __tablename__ = "login_events"
    __table_args__ = (
        UniqueConstraint("ts_date", "area", "cluster", "plant", name="uq_login_events_day_location"),
    )

    ts_date: Mapped[date] = mapped_column(Date, nullable=False)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default="1")
