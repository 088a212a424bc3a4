from datetime import date, time

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_booking_service
from app.core.security import Caller, ROLE_PARENT, ROLE_PROVIDER, get_current_user, require_role
from app.db.base import get_db
from app.schemas.booking import (
    BookingAction,
    BookingCancel,
    BookingCreate,
    BookingHistoryItem,
    BookingReschedule,
    BookingResponse,
    ConflictCheckResponse,
)
from app.services.booking_service import BookingService
from app.services.conflicts import has_conflict

router = APIRouter(prefix="/bookings", tags=["bookings"])


# Parent creates booking request

@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    booking: BookingCreate,
    service: BookingService = Depends(get_booking_service),
    current_user: Caller = Depends(require_role(ROLE_PARENT)),
):
    return service.create(
        current_user,
        provider_id=booking.provider_id,
        booking_date=booking.booking_date,
        start_time=booking.start_time,
        end_time=booking.end_time,
        service_address=booking.service_address,
        notes=booking.notes,
    )


@router.get("/conflict", response_model=ConflictCheckResponse)
def check_conflict(
    provider_id: int = Query(...),
    booking_date: date = Query(...),
    start_time: time = Query(...),
    end_time: time = Query(...),
    db: Session = Depends(get_db),
):
    return ConflictCheckResponse(conflict=has_conflict(db, provider_id, booking_date, start_time, end_time))


# Parent views their bookings

@router.get("/parent/me", response_model=list[BookingResponse])
def parent_my_bookings(
    service: BookingService = Depends(get_booking_service),
    current_user: Caller = Depends(require_role(ROLE_PARENT)),
):
    return service.list_for_parent(current_user)


# Provider views their bookings

@router.get("/provider/me", response_model=list[BookingResponse])
def provider_my_bookings(
    service: BookingService = Depends(get_booking_service),
    current_user: Caller = Depends(require_role(ROLE_PROVIDER)),
):
    return service.list_for_provider(current_user)


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(
    booking_id: int,
    service: BookingService = Depends(get_booking_service),
    current_user: Caller = Depends(get_current_user),
):
    return service.get(current_user, booking_id)


@router.get("/{booking_id}/history", response_model=list[BookingHistoryItem])
def booking_history(
    booking_id: int,
    service: BookingService = Depends(get_booking_service),
    current_user: Caller = Depends(get_current_user),
):
    return service.history(current_user, booking_id)


# Provider actions

@router.post("/{booking_id}/accept", response_model=BookingResponse)
def accept_booking(
    booking_id: int,
    payload: BookingAction = BookingAction(),
    service: BookingService = Depends(get_booking_service),
    current_user: Caller = Depends(require_role(ROLE_PROVIDER)),
):
    return service.accept(current_user, booking_id, payload.note)


@router.post("/{booking_id}/reject", response_model=BookingResponse)
def reject_booking(
    booking_id: int,
    payload: BookingAction = BookingAction(),
    service: BookingService = Depends(get_booking_service),
    current_user: Caller = Depends(require_role(ROLE_PROVIDER)),
):
    return service.reject(current_user, booking_id, payload.note)


@router.post("/{booking_id}/confirm", response_model=BookingResponse)
def confirm_booking(
    booking_id: int,
    payload: BookingAction = BookingAction(),
    service: BookingService = Depends(get_booking_service),
    current_user: Caller = Depends(require_role(ROLE_PROVIDER)),
):
    return service.confirm(current_user, booking_id, payload.note)


@router.post("/{booking_id}/complete", response_model=BookingResponse)
def complete_booking(
    booking_id: int,
    payload: BookingAction = BookingAction(),
    service: BookingService = Depends(get_booking_service),
    current_user: Caller = Depends(require_role(ROLE_PROVIDER)),
):
    return service.complete(current_user, booking_id, payload.note)


# Parent or provider cancels

@router.post("/{booking_id}/cancel", response_model=BookingResponse)
def cancel_booking(
    booking_id: int,
    payload: BookingCancel = BookingCancel(),
    service: BookingService = Depends(get_booking_service),
    current_user: Caller = Depends(require_role(ROLE_PARENT, ROLE_PROVIDER)),
):
    return service.cancel(current_user, booking_id, payload.reason)


# Parent reschedules

@router.post("/{booking_id}/reschedule", response_model=BookingResponse)
def reschedule_booking(
    booking_id: int,
    payload: BookingReschedule,
    service: BookingService = Depends(get_booking_service),
    current_user: Caller = Depends(require_role(ROLE_PARENT)),
):
    return service.reschedule(
        current_user,
        booking_id,
        payload.booking_date,
        payload.start_time,
        payload.end_time,
        payload.note,
    )
