# app/services/conflicts.py
from datetime import date, time
from typing import Optional

from sqlalchemy import text
from sqlalchemy.orm import Session

from app.core.booking_workflow import ACTIVE_STATUSES
from app.db.models.booking import Booking
from app.db.models.provider import ProviderProfile


def has_conflict(
    db: Session,
    provider_id: int,
    booking_date: date,
    start_time: time,
    end_time: time,
    exclude_booking_id: Optional[int] = None,
) -> bool:
    """True if an active booking of this provider overlaps [start_time, end_time) on booking_date.

    Bookings that only touch at a boundary do not overlap.
    """
    q = db.query(Booking.id).filter(
        Booking.provider_id == provider_id,
        Booking.booking_date == booking_date,
        Booking.status.in_([s.value for s in ACTIVE_STATUSES]),
        # requested start < other end AND requested end > other start
        Booking.end_time > start_time,
        Booking.start_time < end_time,
    )
    if exclude_booking_id is not None:
        q = q.filter(Booking.id != exclude_booking_id)

    return bool(db.query(q.exists()).scalar())


def lock_provider_day(db: Session, provider_id: int, booking_date: date) -> None:
    """Serialize check-and-write sequences for one provider and day until commit."""
    if db.get_bind().dialect.name == "postgresql":
        db.execute(
            text("SELECT pg_advisory_xact_lock(:provider_id, :day)"),
            {"provider_id": provider_id, "day": booking_date.toordinal()},
        )
        return

    # Other backends: lock the provider row instead (SQLite ignores FOR UPDATE
    # and serializes writers on its own).
    db.query(ProviderProfile.id).filter(ProviderProfile.id == provider_id).with_for_update().first()
