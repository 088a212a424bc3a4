# app/services/payment_service.py
import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from app.core.errors import AlreadyExistsError, InvalidAmountError, NotFoundError
from app.db.models.booking import Booking
from app.db.models.payment import Payment, PaymentStatus
from app.services.unit_of_work import commit

logger = logging.getLogger(__name__)

DUPLICATE_PAYMENT = "Payment already exists for this booking."


class PaymentService:
    """Keeps the 1:1 payment record of a booking in step with its total."""

    def __init__(self, db: Session):
        self.db = db

    def _get_booking(self, booking_id: int) -> Booking:
        booking = self.db.query(Booking).filter(Booking.id == booking_id).first()
        if not booking:
            raise NotFoundError("Booking", booking_id)
        return booking

    @staticmethod
    def _payable_total(booking: Booking) -> Decimal:
        if booking.total_amount is None or Decimal(booking.total_amount) <= 0:
            raise InvalidAmountError()
        return Decimal(booking.total_amount)

    def get_for_booking(self, booking_id: int) -> Payment:
        payment = self.db.query(Payment).filter(Payment.booking_id == booking_id).first()
        if not payment:
            raise NotFoundError("Payment", message=f"Payment for booking {booking_id} not found")
        return payment

    def create_payment(self, booking_id: int, amount, method: str) -> Payment:
        self._get_booking(booking_id)

        exists = self.db.query(Payment.id).filter(Payment.booking_id == booking_id).first()
        if exists:
            raise AlreadyExistsError(DUPLICATE_PAYMENT)

        payment = Payment(
            booking_id=booking_id,
            amount=Decimal(str(amount)),
            method=method,
            status=PaymentStatus.PENDING.value,
            created_at=datetime.utcnow(),
        )
        self.db.add(payment)
        commit(self.db, duplicate_message=DUPLICATE_PAYMENT)
        self.db.refresh(payment)
        return payment

    def update_payment(self, payment_id: int, status: PaymentStatus, transaction_id: Optional[str] = None) -> Payment:
        payment = self.db.query(Payment).filter(Payment.id == payment_id).first()
        if not payment:
            raise NotFoundError("Payment", payment_id)

        status = PaymentStatus(status)
        if status == PaymentStatus.PAID:
            # a paid record always carries the booking's current total
            payment.amount = self._payable_total(self._get_booking(payment.booking_id))
            payment.paid_at = datetime.utcnow()

        payment.transaction_id = transaction_id or payment.transaction_id
        payment.status = status.value

        commit(self.db)
        self.db.refresh(payment)
        logger.info(f"Payment {payment_id} set to {status.value}", extra={"booking_id": payment.booking_id})
        return payment

    def mark_paid(self, booking_id: int, method: str, transaction_id: Optional[str] = None) -> Payment:
        booking = self._get_booking(booking_id)
        total = self._payable_total(booking)

        payment = self.db.query(Payment).filter(Payment.booking_id == booking_id).first()
        if payment is None:
            payment = Payment(
                booking_id=booking_id,
                amount=total,
                status=PaymentStatus.PENDING.value,
                created_at=datetime.utcnow(),
            )
            self.db.add(payment)

        # never trust a previously stored amount
        payment.amount = total
        payment.method = method
        payment.transaction_id = transaction_id
        payment.status = PaymentStatus.PAID.value
        payment.paid_at = datetime.utcnow()

        commit(self.db, duplicate_message=DUPLICATE_PAYMENT)
        self.db.refresh(payment)
        logger.info(f"Booking {booking_id} marked paid ({total})", extra={"booking_id": booking_id})
        return payment
