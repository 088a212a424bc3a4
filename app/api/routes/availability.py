# app/api/routes/availability.py
from datetime import date, time
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.core.security import Caller, ROLE_PROVIDER, require_role
from app.schemas.availability import AvailabilityCheckResponse, AvailabilityCreate, AvailabilityResponse
from app.services import availability as availability_service

router = APIRouter(prefix="/availability", tags=["availability"])


@router.post("/provider", response_model=AvailabilityResponse, status_code=status.HTTP_201_CREATED)
def add_availability(
    payload: AvailabilityCreate,
    db: Session = Depends(get_db),
    current_user: Caller = Depends(require_role(ROLE_PROVIDER)),
):
    return availability_service.add_availability(db, current_user, payload)


@router.get("/provider", response_model=List[AvailabilityResponse])
def list_availability(
    db: Session = Depends(get_db),
    current_user: Caller = Depends(require_role(ROLE_PROVIDER)),
):
    return availability_service.list_availability(db, current_user)


@router.delete("/provider/{availability_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_availability(
    availability_id: int,
    db: Session = Depends(get_db),
    current_user: Caller = Depends(require_role(ROLE_PROVIDER)),
):
    availability_service.remove_availability(db, current_user, availability_id)


# Does a window of this provider fully contain the requested slot?

@router.get("/check", response_model=AvailabilityCheckResponse)
def check_availability(
    provider_id: int = Query(...),
    on_date: date = Query(..., description="YYYY-MM-DD"),
    start_time: time = Query(...),
    end_time: time = Query(...),
    db: Session = Depends(get_db),
):
    available = availability_service.is_available(db, provider_id, on_date, start_time, end_time)
    return AvailabilityCheckResponse(provider_id=provider_id, available=available)
