"""Visitor-facing check-in endpoints (no authentication)."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from checkin.core.errors import ApiError, missing_fields
from checkin.core.observability import record_checkin_event
from checkin.core.taxonomy import Taxonomy, get_taxonomy
from checkin.db.session import get_db
from checkin.schemas.base import DeletedResponse, OkResponse
from checkin.schemas.checkin import CheckInRequest, CheckOutRequest, MetaResponse, StatusResponse
from checkin.services.checkins import check_out, get_check_in, record_check_in

router = APIRouter(prefix="/api", tags=["checkin"])


@router.get("/meta", response_model=MetaResponse)
def site_meta(taxonomy: Taxonomy = Depends(get_taxonomy)) -> dict:
    """Companies and the area -> cluster -> plant dropdown data."""
    return taxonomy.as_payload()


@router.get("/status", response_model=StatusResponse, response_model_exclude_none=True)
def check_in_status(
    device_id: Optional[str] = Query(None, alias="deviceId"),
    db: Session = Depends(get_db),
) -> StatusResponse:
    if not device_id:
        return StatusResponse(loggedIn=False)
    record = get_check_in(db, device_id)
    if record is None:
        return StatusResponse(loggedIn=False)
    return StatusResponse(loggedIn=True, firstName=record.first_name)


@router.post("/login", response_model=OkResponse)
def submit_check_in(
    payload: CheckInRequest,
    db: Session = Depends(get_db),
) -> OkResponse:
    if payload.missing_fields():
        raise missing_fields()
    record_check_in(db, payload)
    db.commit()
    record_checkin_event("check_in")
    return OkResponse()


@router.post("/logout", response_model=DeletedResponse)
def submit_check_out(
    payload: CheckOutRequest,
    db: Session = Depends(get_db),
) -> DeletedResponse:
    if not payload.device_id:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "missing_device")
    deleted = check_out(db, payload.device_id)
    db.commit()
    record_checkin_event("check_out")
    return DeletedResponse(deleted=deleted)
