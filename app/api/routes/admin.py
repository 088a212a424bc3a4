# app/api/routes/admin.py
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_booking_service, get_review_service
from app.core.security import Caller, require_admin
from app.db.base import get_db
from app.schemas.admin import ProviderApprovalResponse
from app.schemas.attendance import AttendanceResponse, CheckIn, CheckInResponse
from app.schemas.booking import BookingListResponse, BookingResponse, BookingStatusChange
from app.schemas.payment import MarkPaid, PaymentResponse
from app.schemas.review import ReviewDecision, ReviewListResponse, ReviewResponse
from app.services import provider_service
from app.services.booking_service import BookingService
from app.services.review_service import ReviewService

router = APIRouter(prefix="/admin", tags=["admin"])


# -------------------------
# 1. Bookings (filterable)
# -------------------------
@router.get("/bookings", response_model=BookingListResponse)
def list_bookings(
    status: Optional[str] = Query(None, description="pending/accepted/rejected/confirmed/completed/cancelled"),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    query: Optional[str] = Query(None, description="parent/sitter name or email, address"),
    page: int = Query(1),
    page_size: int = Query(20),
    service: BookingService = Depends(get_booking_service),
    admin: Caller = Depends(require_admin),
):
    result = service.admin_list(status, date_from, date_to, query, page, page_size)
    return BookingListResponse(
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        items=[BookingResponse.model_validate(b) for b in result.items],
    )


# --------------------------------------------------
# 2. Override booking status (still bound by the transition table)
# --------------------------------------------------
@router.put("/bookings/{booking_id}/status", response_model=BookingResponse)
def change_booking_status(
    booking_id: int,
    payload: BookingStatusChange,
    service: BookingService = Depends(get_booking_service),
    admin: Caller = Depends(require_admin),
):
    return service.admin_set_status(admin, booking_id, payload.to_status, payload.note)


@router.post("/bookings/{booking_id}/mark-paid", response_model=PaymentResponse)
def mark_booking_paid(
    booking_id: int,
    payload: MarkPaid,
    service: BookingService = Depends(get_booking_service),
    admin: Caller = Depends(require_admin),
):
    return service.mark_paid(booking_id, payload.method, payload.transaction_id)


@router.post("/bookings/{booking_id}/check-in", response_model=CheckInResponse)
def check_in(
    booking_id: int,
    payload: CheckIn = CheckIn(),
    service: BookingService = Depends(get_booking_service),
    admin: Caller = Depends(require_admin),
):
    attendance, already = service.check_in(booking_id, payload.location)
    return CheckInResponse(
        already_checked_in=already,
        attendance_id=attendance.id,
        check_in_time=attendance.check_in_time,
    )


@router.post("/bookings/{booking_id}/check-out", response_model=AttendanceResponse)
def check_out(
    booking_id: int,
    service: BookingService = Depends(get_booking_service),
    admin: Caller = Depends(require_admin),
):
    return service.check_out(booking_id)


# --------------------------------------------------
# 3. Approve / un-approve sitter profile
# --------------------------------------------------
@router.put("/providers/{provider_id}/approve", response_model=ProviderApprovalResponse)
def approve_provider(
    provider_id: int,
    approve: bool = Query(True),
    db: Session = Depends(get_db),
    admin: Caller = Depends(require_admin),
):
    profile = provider_service.approve(db, provider_id, approve)
    return ProviderApprovalResponse(ok=True, provider_id=profile.id, is_approved=profile.is_approved)


# --------------------------------------------------
# 4. Review moderation
# --------------------------------------------------
@router.get("/reviews", response_model=ReviewListResponse)
def list_reviews(
    approved: Optional[bool] = Query(None),
    hidden: Optional[bool] = Query(None),
    query: Optional[str] = Query(None),
    page: int = Query(1),
    page_size: int = Query(20),
    service: ReviewService = Depends(get_review_service),
    admin: Caller = Depends(require_admin),
):
    result = service.admin_list(approved, hidden, query, page, page_size)
    return ReviewListResponse(
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        items=[ReviewResponse.model_validate(r) for r in result.items],
    )


@router.put("/reviews/{review_id}/decision", response_model=ReviewResponse)
def review_decision(
    review_id: int,
    payload: ReviewDecision,
    service: ReviewService = Depends(get_review_service),
    admin: Caller = Depends(require_admin),
):
    return service.admin_decide(review_id, payload.approve, payload.hide)
