# app/db/models/booking.py
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Index, Integer, Numeric, String, Time
from sqlalchemy.orm import relationship
from app.db.base import Base
from app.core.booking_workflow import INITIAL_STATUS


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_booking_interval"),
        Index("ix_bookings_provider_date", "provider_id", "booking_date"),
    )

    id = Column(Integer, primary_key=True, index=True)

    parent_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    provider_id = Column(Integer, ForeignKey("provider_profiles.id"), nullable=False)

    booking_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    service_address = Column(String, nullable=False, default="")
    notes = Column(String, nullable=True)

    status = Column(String, nullable=False, default=INITIAL_STATUS.value)

    # rate x duration at creation time, never recomputed
    total_amount = Column(Numeric(10, 2), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    completed_at = Column(DateTime, nullable=True)

    version_id = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}

    # relationships
    parent = relationship("User", foreign_keys=[parent_id])
    provider = relationship("ProviderProfile", foreign_keys=[provider_id])


class BookingStatusHistory(Base):
    """Append-only audit trail of status changes."""
    __tablename__ = "booking_status_history"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, index=True)
    from_status = Column(String, nullable=False)
    to_status = Column(String, nullable=False)
    changed_by_user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    changed_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    note = Column(String, nullable=True)
