"""CheckIn model: one row per device that is currently on site."""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from checkin.db.base import Base, IDMixin, LocationMixin


class CheckIn(IDMixin, LocationMixin, Base):
    __tablename__ = "logins"

    device_id: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    job_id: Mapped[str] = mapped_column(String, nullable=False)
    phone: Mapped[str] = mapped_column(String, nullable=False)
    company: Mapped[str] = mapped_column(String, nullable=False, index=True)
    # Client-local "yyyy-mm-dd hh:mm"; sorts chronologically as text.
    ts: Mapped[str] = mapped_column(String, nullable=False, index=True)
