# app/api/routes/payments.py
from fastapi import APIRouter, Depends, status

from app.api.deps import get_booking_service, get_payment_service
from app.core.security import Caller, get_current_user, require_admin
from app.schemas.payment import PaymentCreate, PaymentResponse, PaymentUpdate
from app.services.booking_service import BookingService
from app.services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def create_payment(
    payload: PaymentCreate,
    service: PaymentService = Depends(get_payment_service),
    admin: Caller = Depends(require_admin),
):
    return service.create_payment(payload.booking_id, payload.amount, payload.method)


@router.put("/{payment_id}", response_model=PaymentResponse)
def update_payment(
    payment_id: int,
    payload: PaymentUpdate,
    service: PaymentService = Depends(get_payment_service),
    admin: Caller = Depends(require_admin),
):
    return service.update_payment(payment_id, payload.status, payload.transaction_id)


# Either party of the booking (or an admin) can see its payment record
@router.get("/booking/{booking_id}", response_model=PaymentResponse)
def payment_for_booking(
    booking_id: int,
    service: PaymentService = Depends(get_payment_service),
    bookings: BookingService = Depends(get_booking_service),
    current_user: Caller = Depends(get_current_user),
):
    bookings.get(current_user, booking_id)
    return service.get_for_booking(booking_id)
