"""Payment record stays in step with the booking total."""

from datetime import time
from decimal import Decimal

import pytest

from app.core.errors import AlreadyExistsError, ConcurrencyConflictError, InvalidAmountError, NotFoundError
from app.db.models.payment import Payment, PaymentStatus
from app.services.booking_service import BookingService
from app.services.payment_service import PaymentService
from app.services.unit_of_work import commit
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from conftest import MONDAY, as_parent


@pytest.fixture
def booking(db, notifier, make_user, make_sitter):
    sitter = make_sitter(hourly_rate="20.00")
    return BookingService(db, notifier).create(as_parent(make_user()), sitter.id, MONDAY, time(9, 0), time(11, 30))


@pytest.fixture
def payments(db):
    return PaymentService(db)


def test_mark_paid_overwrites_stale_amount(db, payments, booking):
    stale = db.query(Payment).filter(Payment.booking_id == booking.id).one()
    stale.amount = Decimal("1.00")
    db.commit()

    paid = payments.mark_paid(booking.id, "cash", "TX-1")

    assert Decimal(paid.amount) == Decimal(booking.total_amount) == Decimal("50.00")
    assert paid.status == PaymentStatus.PAID.value
    assert paid.method == "cash"
    assert paid.transaction_id == "TX-1"
    assert paid.paid_at is not None
    assert db.query(Payment).filter(Payment.booking_id == booking.id).count() == 1


def test_mark_paid_creates_missing_payment(db, payments, booking):
    db.query(Payment).filter(Payment.booking_id == booking.id).delete()
    db.commit()

    paid = payments.mark_paid(booking.id, "card")
    assert Decimal(paid.amount) == Decimal("50.00")


def test_mark_paid_missing_booking(payments):
    with pytest.raises(NotFoundError):
        payments.mark_paid(777, "cash")


def test_mark_paid_rejects_empty_total(db, payments, booking):
    booking.total_amount = None
    db.commit()
    with pytest.raises(InvalidAmountError):
        payments.mark_paid(booking.id, "cash")


def test_booking_service_delegates_mark_paid(db, notifier, booking):
    paid = BookingService(db, notifier).mark_paid(booking.id, "mobile wallet", "BK-99")
    assert paid.status == "paid"


def test_second_payment_for_booking(payments, booking):
    with pytest.raises(AlreadyExistsError):
        payments.create_payment(booking.id, 50, "cash")


def test_create_payment_missing_booking(payments):
    with pytest.raises(NotFoundError):
        payments.create_payment(31337, 10, "cash")


def test_update_to_paid_resyncs_amount(db, payments, booking):
    payment = payments.get_for_booking(booking.id)
    payment.amount = Decimal("5.00")
    db.commit()

    updated = payments.update_payment(payment.id, PaymentStatus.PAID, "TX-7")
    assert Decimal(updated.amount) == Decimal("50.00")
    assert updated.paid_at is not None


def test_update_to_failed_keeps_amount(payments, booking):
    payment = payments.get_for_booking(booking.id)
    updated = payments.update_payment(payment.id, "failed")
    assert updated.status == "failed"
    assert updated.paid_at is None


def test_update_missing_payment(payments):
    with pytest.raises(NotFoundError):
        payments.update_payment(404, PaymentStatus.PAID)


# --------------------------
# commit error mapping
# --------------------------

class _FailingSession:
    def __init__(self, exc):
        self.exc = exc
        self.rolled_back = False

    def commit(self):
        raise self.exc

    def rollback(self):
        self.rolled_back = True


def test_stale_write_becomes_concurrency_conflict():
    session = _FailingSession(StaleDataError("version mismatch"))
    with pytest.raises(ConcurrencyConflictError):
        commit(session)
    assert session.rolled_back


def test_unique_violation_becomes_already_exists():
    session = _FailingSession(IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed")))
    with pytest.raises(AlreadyExistsError):
        commit(session, duplicate_message="dup")
    assert session.rolled_back


def test_unexpected_integrity_error_propagates():
    session = _FailingSession(IntegrityError("INSERT", {}, Exception("NOT NULL constraint failed")))
    with pytest.raises(IntegrityError):
        commit(session)
