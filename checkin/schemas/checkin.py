"""Schemas for the visitor check-in endpoints."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from checkin.schemas.base import CamelRequest


class CheckInRequest(CamelRequest):
    device_id: Optional[str] = Field(None, alias="deviceId")
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    job_id: Optional[str] = Field(None, alias="jobId")
    phone: Optional[str] = None
    company: Optional[str] = None
    area: Optional[str] = None
    cluster: Optional[str] = None
    plant: Optional[str] = None
    ts: Optional[str] = None

    def missing_fields(self) -> List[str]:
        return [name for name, value in self.model_dump().items() if not value]


class CheckOutRequest(CamelRequest):
    device_id: Optional[str] = Field(None, alias="deviceId")


class StatusResponse(BaseModel):
    loggedIn: bool
    firstName: Optional[str] = None


class MetaResponse(BaseModel):
    companies: List[str]
    areas: Dict[str, Dict[str, List[str]]]
