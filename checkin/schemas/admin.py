"""Schemas for administrator endpoints."""

from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from checkin.schemas.base import ORMModel


class AdminLoginRequest(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    username: Optional[str] = None
    password: Optional[str] = None

    @field_validator("username", "password", mode="before")
    @classmethod
    def drop_non_scalars(cls, value):
        # Anything that cannot be a credential simply fails to match.
        if isinstance(value, bool) or not isinstance(value, (str, int, float)):
            return None
        return value


class AdminMeResponse(BaseModel):
    authed: bool


class RosterRow(ORMModel):
    id: int
    first_name: str
    last_name: str
    job_id: str
    phone: str
    company: str
    area: str
    cluster: str
    plant: str
    ts: str


class RosterResponse(BaseModel):
    count: int
    rows: List[RosterRow]


class MetricPoint(BaseModel):
    date: dt.date
    count: int
