"""Reviews are gated on a completed booking and moderated before they count."""

from datetime import time

import pytest

from app.core.errors import (
    AlreadyExistsError,
    BookingNotCompletedError,
    InvalidTransitionError,
    NotFoundError,
    UnauthorizedError,
    ValidationFailedError,
)
from app.services.booking_service import BookingService
from app.services.review_service import ReviewService

from conftest import MONDAY, as_parent, as_provider


@pytest.fixture
def parent(make_user):
    return make_user()


@pytest.fixture
def sitter(make_sitter):
    return make_sitter()


@pytest.fixture
def bookings(db, notifier):
    return BookingService(db, notifier)


@pytest.fixture
def reviews(db):
    return ReviewService(db)


@pytest.fixture
def completed(bookings, parent, sitter):
    booking = bookings.create(as_parent(parent), sitter.id, MONDAY, time(9, 0), time(10, 0))
    provider = as_provider(sitter)
    bookings.accept(provider, booking.id)
    bookings.confirm(provider, booking.id)
    return bookings.complete(provider, booking.id)


def test_review_completed_booking(reviews, completed, parent, sitter):
    review = reviews.create_review(as_parent(parent), completed.id, 5, "  Lovely with the kids  ")
    assert review.provider_id == sitter.id
    assert review.comment == "Lovely with the kids"
    assert review.is_approved is False
    assert review.is_hidden is False


def test_second_review_already_exists(reviews, completed, parent):
    reviews.create_review(as_parent(parent), completed.id, 4)
    with pytest.raises(AlreadyExistsError):
        reviews.create_review(as_parent(parent), completed.id, 5)


def test_review_requires_completed(reviews, bookings, parent, sitter):
    booking = bookings.create(as_parent(parent), sitter.id, MONDAY, time(9, 0), time(10, 0))
    with pytest.raises(BookingNotCompletedError) as exc_info:
        reviews.create_review(as_parent(parent), booking.id, 5)
    assert isinstance(exc_info.value, InvalidTransitionError)


def test_review_only_by_booking_parent(reviews, completed, make_user):
    with pytest.raises(UnauthorizedError):
        reviews.create_review(as_parent(make_user()), completed.id, 5)


def test_review_missing_booking(reviews, parent):
    with pytest.raises(NotFoundError):
        reviews.create_review(as_parent(parent), 999, 5)


@pytest.mark.parametrize("rating", [0, 6])
def test_rating_out_of_range(reviews, completed, parent, rating):
    with pytest.raises(ValidationFailedError):
        reviews.create_review(as_parent(parent), completed.id, rating)


def test_can_review(reviews, completed, parent, make_user):
    assert reviews.can_review(as_parent(parent), completed.id) == (True, None)
    assert reviews.can_review(as_parent(make_user()), completed.id)[0] is False

    reviews.create_review(as_parent(parent), completed.id, 3)
    assert reviews.can_review(as_parent(parent), completed.id) == (False, "Review already submitted")


def test_moderation(reviews, completed, parent):
    review = reviews.create_review(as_parent(parent), completed.id, 2, "late")

    pending = reviews.admin_list(approved=False)
    assert pending.total == 1 and pending.items[0].id == review.id

    decided = reviews.admin_decide(review.id, approve=True, hide=True)
    assert decided.is_approved and decided.is_hidden
    assert reviews.admin_list(approved=False).total == 0
    assert reviews.admin_list(query="LATE").total == 1
    assert [r.id for r in reviews.list_mine(as_parent(parent))] == [review.id]


def test_decide_missing_review(reviews):
    with pytest.raises(NotFoundError):
        reviews.admin_decide(55, approve=True)
