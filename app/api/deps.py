# app/api/deps.py
from fastapi import Depends
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.services.booking_service import BookingService
from app.services.notifications import NotificationSink, get_notifier
from app.services.payment_service import PaymentService
from app.services.review_service import ReviewService


def get_booking_service(
    db: Session = Depends(get_db),
    notifier: NotificationSink = Depends(get_notifier),
) -> BookingService:
    return BookingService(db, notifier)


def get_payment_service(db: Session = Depends(get_db)) -> PaymentService:
    return PaymentService(db)


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    return ReviewService(db)
