# app/db/models/payment.py
import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String
from app.db.base import Base


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class Payment(Base):
    """Internal payment record, one per booking."""
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, unique=True)

    amount = Column(Numeric(10, 2), nullable=False)
    method = Column(String, nullable=True)  # cash, card, mobile wallet ...
    transaction_id = Column(String, nullable=True)
    status = Column(String, nullable=False, default=PaymentStatus.PENDING.value)

    created_at = Column(DateTime, default=datetime.utcnow)
    paid_at = Column(DateTime, nullable=True)
