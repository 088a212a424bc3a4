"""Overlap detection against a provider's active bookings."""

from datetime import datetime, time
from decimal import Decimal

import pytest

from app.core.booking_workflow import BookingStatus
from app.db.models.booking import Booking
from app.services.conflicts import has_conflict, lock_provider_day

from conftest import MONDAY


@pytest.fixture
def sitter(make_sitter):
    return make_sitter()


@pytest.fixture
def book(db, make_user, sitter):
    parent = make_user()

    def _book(start, end, status=BookingStatus.PENDING, on_date=MONDAY):
        booking = Booking(
            parent_id=parent.id,
            provider_id=sitter.id,
            booking_date=on_date,
            start_time=start,
            end_time=end,
            status=status.value,
            total_amount=Decimal("20.00"),
            created_at=datetime.utcnow(),
        )
        db.add(booking)
        db.commit()
        return booking

    return _book


@pytest.mark.parametrize("start,end,expected", [
    (time(10, 0), time(11, 0), True),    # overlaps the first half hour
    (time(11, 0), time(12, 0), True),    # overlaps the second half hour
    (time(10, 45), time(11, 15), True),  # inside
    (time(10, 0), time(12, 0), True),    # contains
    (time(9, 0), time(10, 0), False),
    (time(9, 0), time(10, 30), False),   # touches start
    (time(11, 30), time(12, 30), False), # touches end
])
def test_overlap_with_existing_booking(db, sitter, book, start, end, expected):
    book(time(10, 30), time(11, 30))
    assert has_conflict(db, sitter.id, MONDAY, start, end) is expected


def test_other_days_do_not_conflict(db, sitter, book):
    book(time(10, 0), time(11, 0))
    assert not has_conflict(db, sitter.id, MONDAY.replace(day=16), time(10, 0), time(11, 0))


def test_other_providers_do_not_conflict(db, make_sitter, book):
    book(time(10, 0), time(11, 0))
    other = make_sitter()
    assert not has_conflict(db, other.id, MONDAY, time(10, 0), time(11, 0))


@pytest.mark.parametrize("status", [BookingStatus.PENDING, BookingStatus.ACCEPTED, BookingStatus.CONFIRMED])
def test_active_statuses_block(db, sitter, book, status):
    book(time(10, 0), time(11, 0), status=status)
    assert has_conflict(db, sitter.id, MONDAY, time(10, 0), time(11, 0))


@pytest.mark.parametrize("status", [BookingStatus.REJECTED, BookingStatus.COMPLETED, BookingStatus.CANCELLED])
def test_finished_bookings_free_the_slot(db, sitter, book, status):
    book(time(10, 0), time(11, 0), status=status)
    assert not has_conflict(db, sitter.id, MONDAY, time(10, 0), time(11, 0))


def test_excluded_booking_is_ignored(db, sitter, book):
    booking = book(time(10, 0), time(11, 0))
    assert not has_conflict(db, sitter.id, MONDAY, time(10, 30), time(11, 30), exclude_booking_id=booking.id)


def test_lock_provider_day_runs_inside_transaction(db, sitter):
    lock_provider_day(db, sitter.id, MONDAY)
    db.rollback()
