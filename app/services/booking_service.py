"""Booking orchestrator.

Every mutation follows the same shape: load the booking row with a lock,
authorize the caller against it, check status and slot rules, apply the
transition, append history, commit, and only then request notifications.
"""

import logging
from datetime import date, datetime, time
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session, aliased

from app.core import config
from app.core.booking_workflow import (
    INITIAL_STATUS,
    BookingStatus,
    allowed_next,
    ensure_transition,
    parse_status,
)
from app.core.errors import (
    ConflictError,
    InvalidIntervalError,
    InvalidTransitionError,
    NotCheckedInError,
    NotFoundError,
    UnapprovedError,
    UnauthorizedError,
)
from app.core.pagination import Page, clamp_paging, offset_for
from app.core.security import Caller
from app.db.models.attendance import Attendance
from app.db.models.booking import Booking, BookingStatusHistory
from app.db.models.payment import Payment, PaymentStatus
from app.db.models.provider import ProviderProfile
from app.db.models.user import User
from app.services.availability import is_available
from app.services.conflicts import has_conflict, lock_provider_day
from app.services.notifications import NotificationSink, send_safely
from app.services.payment_service import PaymentService
from app.services.provider_service import get_profile_for_owner
from app.services.unit_of_work import commit, rollback_on_error

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

DUPLICATE_ATTENDANCE = "Attendance already recorded for this booking."


def booking_total(start_time: time, end_time: time, hourly_rate) -> Decimal:
    """hours(end - start) x hourly rate, rounded to cents."""
    seconds = (datetime.combine(date.min, end_time) - datetime.combine(date.min, start_time)).total_seconds()
    hours = Decimal(int(seconds)) / Decimal(3600)
    return (hours * Decimal(str(hourly_rate))).quantize(CENT, rounding=ROUND_HALF_UP)


class BookingService:

    def __init__(self, db: Session, notifier: NotificationSink):
        self.db = db
        self.notifier = notifier

    # --------------------------
    # helpers
    # --------------------------

    def _get_locked(self, booking_id: int) -> Booking:
        booking = (
            self.db.query(Booking)
            .filter(Booking.id == booking_id)
            .with_for_update()
            .first()
        )
        if not booking:
            raise NotFoundError("Booking", booking_id)
        return booking

    def _load_for_provider(self, caller: Caller, booking_id: int) -> Booking:
        booking = self._get_locked(booking_id)
        profile = get_profile_for_owner(self.db, caller.user_id)
        if profile is None or booking.provider_id != profile.id:
            raise UnauthorizedError("Not your booking")
        return booking

    def _provider_owner_id(self, booking: Booking) -> int:
        return (
            self.db.query(ProviderProfile.owner_id)
            .filter(ProviderProfile.id == booking.provider_id)
            .scalar()
        )

    def _transition(self, booking: Booking, target: BookingStatus, actor_id: int, note: Optional[str]) -> bool:
        current = BookingStatus(booking.status)
        if not ensure_transition(current, target):
            return False
        self._apply(booking, current, target, actor_id, note)
        return True

    def _apply(self, booking: Booking, current: BookingStatus, target: BookingStatus, actor_id: int, note: Optional[str]):
        booking.status = target.value
        self.db.add(BookingStatusHistory(
            booking_id=booking.id,
            from_status=current.value,
            to_status=target.value,
            changed_by_user_id=actor_id,
            changed_at=datetime.utcnow(),
            note=note,
        ))
        logger.info(
            f"Booking {booking.id}: {current.value} -> {target.value} by user {actor_id}",
            extra={"booking_id": booking.id, "user_id": actor_id},
        )

    def _require_status(self, booking: Booking, expected: BookingStatus, target: BookingStatus):
        current = BookingStatus(booking.status)
        if current != expected:
            raise InvalidTransitionError(
                current, target, allowed_next(current),
                message=f"Only {expected.value} bookings can be {target.value}; this one is {current.value}.",
            )

    def _notify(self, receiver_id: int, title: str, message: str):
        send_safely(self.notifier, receiver_id, title, message)

    def _ensure_free(self, provider_id: int, booking_date: date, start_time: time, end_time: time,
                     exclude_booking_id: Optional[int] = None):
        lock_provider_day(self.db, provider_id, booking_date)
        if has_conflict(self.db, provider_id, booking_date, start_time, end_time, exclude_booking_id):
            raise ConflictError("Time slot already booked")

    # --------------------------
    # create
    # --------------------------

    @rollback_on_error
    def create(
        self,
        caller: Caller,
        provider_id: int,
        booking_date: date,
        start_time: time,
        end_time: time,
        service_address: str = "",
        notes: Optional[str] = None,
    ) -> Booking:
        provider = self.db.query(ProviderProfile).filter(ProviderProfile.id == provider_id).first()
        if not provider:
            raise NotFoundError("Sitter", provider_id)
        if not provider.is_approved:
            raise UnapprovedError()
        if end_time <= start_time:
            raise InvalidIntervalError(start_time, end_time)

        self._ensure_free(provider.id, booking_date, start_time, end_time)

        total = booking_total(start_time, end_time, provider.hourly_rate)
        now = datetime.utcnow()

        booking = Booking(
            parent_id=caller.user_id,
            provider_id=provider.id,
            booking_date=booking_date,
            start_time=start_time,
            end_time=end_time,
            service_address=service_address or "",
            notes=notes,
            status=INITIAL_STATUS.value,
            total_amount=total,
            created_at=now,
        )
        self.db.add(booking)
        self.db.flush()

        self.db.add(Payment(
            booking_id=booking.id,
            amount=total,
            status=PaymentStatus.PENDING.value,
            created_at=now,
        ))

        commit(self.db)
        self.db.refresh(booking)
        logger.info(
            f"Booking {booking.id} requested by user {caller.user_id} ({total})",
            extra={"booking_id": booking.id, "provider_id": provider.id},
        )

        self._notify(
            provider.owner_id, "New Booking Request",
            f"New booking request #{booking.id} for {booking_date:%Y-%m-%d} ({start_time:%H:%M}-{end_time:%H:%M}).",
        )
        return booking

    # --------------------------
    # provider actions
    # --------------------------

    @rollback_on_error
    def accept(self, caller: Caller, booking_id: int, note: Optional[str] = None) -> Booking:
        booking = self._load_for_provider(caller, booking_id)
        self._require_status(booking, BookingStatus.PENDING, BookingStatus.ACCEPTED)

        # another request may have taken the slot since this one was created
        self._ensure_free(
            booking.provider_id, booking.booking_date, booking.start_time, booking.end_time,
            exclude_booking_id=booking.id,
        )

        self._transition(booking, BookingStatus.ACCEPTED, caller.user_id, note)
        commit(self.db)
        self.db.refresh(booking)

        self._notify(booking.parent_id, "Booking Accepted", f"Your booking request #{booking.id} was accepted.")
        return booking

    @rollback_on_error
    def reject(self, caller: Caller, booking_id: int, note: Optional[str] = None) -> Booking:
        booking = self._load_for_provider(caller, booking_id)
        self._require_status(booking, BookingStatus.PENDING, BookingStatus.REJECTED)

        self._transition(booking, BookingStatus.REJECTED, caller.user_id, note)
        commit(self.db)
        self.db.refresh(booking)

        self._notify(booking.parent_id, "Booking Rejected", f"Your booking request #{booking.id} was rejected.")
        return booking

    @rollback_on_error
    def confirm(self, caller: Caller, booking_id: int, note: Optional[str] = None) -> Booking:
        booking = self._load_for_provider(caller, booking_id)
        self._require_status(booking, BookingStatus.ACCEPTED, BookingStatus.CONFIRMED)

        self._transition(booking, BookingStatus.CONFIRMED, caller.user_id, note)
        commit(self.db)
        self.db.refresh(booking)

        self._notify(booking.parent_id, "Booking Confirmed", f"Booking #{booking.id} confirmed.")
        return booking

    @rollback_on_error
    def complete(self, caller: Caller, booking_id: int, note: Optional[str] = None) -> Booking:
        booking = self._load_for_provider(caller, booking_id)
        self._require_status(booking, BookingStatus.CONFIRMED, BookingStatus.COMPLETED)

        self._transition(booking, BookingStatus.COMPLETED, caller.user_id, note)
        booking.completed_at = datetime.utcnow()
        commit(self.db)
        self.db.refresh(booking)

        self._notify(
            booking.parent_id, "Booking Completed",
            f"Booking #{booking.id} completed. You can leave a review now.",
        )
        return booking

    # --------------------------
    # parent / either party
    # --------------------------

    @rollback_on_error
    def cancel(self, caller: Caller, booking_id: int, reason: Optional[str] = None) -> Booking:
        booking = self._get_locked(booking_id)

        profile = get_profile_for_owner(self.db, caller.user_id)
        is_parent = booking.parent_id == caller.user_id
        is_provider = profile is not None and booking.provider_id == profile.id
        if not is_parent and not is_provider:
            raise UnauthorizedError("You are not allowed to cancel this booking.")

        current = BookingStatus(booking.status)
        if current == BookingStatus.CANCELLED:
            return booking
        if current == BookingStatus.COMPLETED:
            raise InvalidTransitionError(
                current, BookingStatus.CANCELLED, allowed_next(current),
                message="Completed booking cannot be cancelled.",
            )

        if current == BookingStatus.REJECTED:
            # a rejected request can still be withdrawn, outside the status table
            self._apply(booking, current, BookingStatus.CANCELLED, caller.user_id, reason)
        else:
            self._transition(booking, BookingStatus.CANCELLED, caller.user_id, reason)
        commit(self.db)
        self.db.refresh(booking)

        message = f"Booking #{booking.id} cancelled."
        self._notify(booking.parent_id, "Booking Cancelled", message)
        self._notify(self._provider_owner_id(booking), "Booking Cancelled", message)
        return booking

    @rollback_on_error
    def reschedule(
        self,
        caller: Caller,
        booking_id: int,
        new_date: date,
        new_start: time,
        new_end: time,
        note: Optional[str] = None,
    ) -> Booking:
        booking = self._get_locked(booking_id)

        if booking.parent_id != caller.user_id:
            raise UnauthorizedError("Only the parent can reschedule.")

        current = BookingStatus(booking.status)
        if current in (BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.REJECTED):
            raise InvalidTransitionError(
                current, BookingStatus.PENDING, allowed_next(current),
                message="This booking cannot be rescheduled.",
            )

        if new_end <= new_start:
            raise InvalidIntervalError(new_start, new_end)

        if not is_available(self.db, booking.provider_id, new_date, new_start, new_end):
            raise ConflictError("Sitter is not available at that time.", code="UNAVAILABLE")

        self._ensure_free(booking.provider_id, new_date, new_start, new_end, exclude_booking_id=booking.id)

        booking.booking_date = new_date
        booking.start_time = new_start
        booking.end_time = new_end

        # a moved booking goes back through provider approval
        self._apply(booking, current, BookingStatus.PENDING, caller.user_id, note or config.RESCHEDULE_DEFAULT_NOTE)
        commit(self.db)
        self.db.refresh(booking)

        self._notify(
            self._provider_owner_id(booking), "Booking Rescheduled",
            f"Booking #{booking.id} rescheduled to {new_date:%Y-%m-%d} ({new_start:%H:%M}-{new_end:%H:%M}).",
        )
        return booking

    # --------------------------
    # admin
    # --------------------------

    @rollback_on_error
    def admin_set_status(self, caller: Caller, booking_id: int, to_status: str, note: Optional[str] = None) -> Booking:
        if not caller.is_admin:
            raise UnauthorizedError("Admin only")

        booking = self._get_locked(booking_id)
        target = parse_status(to_status)

        if self._transition(booking, target, caller.user_id, note):
            if target == BookingStatus.COMPLETED:
                booking.completed_at = datetime.utcnow()
            commit(self.db)
            self.db.refresh(booking)
        return booking

    def mark_paid(self, booking_id: int, method: str, transaction_id: Optional[str] = None) -> Payment:
        return PaymentService(self.db).mark_paid(booking_id, method, transaction_id)

    # --------------------------
    # attendance
    # --------------------------

    @rollback_on_error
    def check_in(self, booking_id: int, location: Optional[str] = None) -> Tuple[Attendance, bool]:
        """Record the sitter's arrival. Returns (attendance, already_checked_in)."""
        booking = self._get_locked(booking_id)

        existing = self.db.query(Attendance).filter(Attendance.booking_id == booking.id).first()
        if existing:
            commit(self.db)  # nothing to write, just drop the row lock
            return existing, True

        attendance = Attendance(
            booking_id=booking.id,
            check_in_time=datetime.utcnow(),
            location=location,
        )
        self.db.add(attendance)
        commit(self.db, duplicate_message=DUPLICATE_ATTENDANCE)
        self.db.refresh(attendance)
        logger.info(f"Booking {booking_id} checked in", extra={"booking_id": booking_id})
        return attendance, False

    @rollback_on_error
    def check_out(self, booking_id: int) -> Attendance:
        self._get_locked(booking_id)

        attendance = self.db.query(Attendance).filter(Attendance.booking_id == booking_id).first()
        if not attendance:
            raise NotCheckedInError()

        attendance.check_out_time = datetime.utcnow()
        commit(self.db)
        self.db.refresh(attendance)
        logger.info(f"Booking {booking_id} checked out", extra={"booking_id": booking_id})
        return attendance

    # --------------------------
    # reads
    # --------------------------

    def _check_can_view(self, caller: Caller, booking: Booking):
        if caller.is_admin or booking.parent_id == caller.user_id:
            return
        profile = get_profile_for_owner(self.db, caller.user_id)
        if profile is None or profile.id != booking.provider_id:
            raise UnauthorizedError("Not your booking")

    def get(self, caller: Caller, booking_id: int) -> Booking:
        booking = self.db.query(Booking).filter(Booking.id == booking_id).first()
        if not booking:
            raise NotFoundError("Booking", booking_id)
        self._check_can_view(caller, booking)
        return booking

    def history(self, caller: Caller, booking_id: int) -> List[BookingStatusHistory]:
        self.get(caller, booking_id)
        return (
            self.db.query(BookingStatusHistory)
            .filter(BookingStatusHistory.booking_id == booking_id)
            .order_by(BookingStatusHistory.changed_at.desc(), BookingStatusHistory.id.desc())
            .all()
        )

    def list_for_parent(self, caller: Caller) -> List[Booking]:
        return (
            self.db.query(Booking)
            .filter(Booking.parent_id == caller.user_id)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
            .all()
        )

    def list_for_provider(self, caller: Caller) -> List[Booking]:
        profile = get_profile_for_owner(self.db, caller.user_id)
        if profile is None:
            return []
        return (
            self.db.query(Booking)
            .filter(Booking.provider_id == profile.id)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
            .all()
        )

    def admin_list(
        self,
        status: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        query: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> Page:
        page, page_size = clamp_paging(page, page_size, config.SEARCH_MAX_PAGE_SIZE)

        parent = aliased(User)
        sitter_user = aliased(User)
        q = (
            self.db.query(Booking)
            .join(parent, parent.id == Booking.parent_id)
            .join(ProviderProfile, ProviderProfile.id == Booking.provider_id)
            .join(sitter_user, sitter_user.id == ProviderProfile.owner_id)
        )

        if status:
            q = q.filter(Booking.status == parse_status(status).value)
        if date_from:
            q = q.filter(Booking.booking_date >= date_from)
        if date_to:
            q = q.filter(Booking.booking_date <= date_to)
        if query and query.strip():
            like = f"%{query.strip()}%"
            q = q.filter(or_(
                parent.full_name.ilike(like),
                parent.email.ilike(like),
                sitter_user.full_name.ilike(like),
                sitter_user.email.ilike(like),
                Booking.service_address.ilike(like),
            ))

        total = q.count()
        items = (
            q.order_by(Booking.created_at.desc(), Booking.id.desc())
            .offset(offset_for(page, page_size))
            .limit(page_size)
            .all()
        )
        return Page(items, total, page, page_size)
