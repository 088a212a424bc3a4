"""Booking status state machine.

Pending -> {Accepted, Rejected, Cancelled}
Accepted -> {Confirmed, Rejected, Cancelled}
Confirmed -> {Completed, Cancelled}
Rejected, Completed, Cancelled are terminal.

A same-state request is a no-op and always valid. Anything else outside the
table raises InvalidTransitionError.
"""

import enum

from app.core.errors import InvalidStatusError, InvalidTransitionError


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


INITIAL_STATUS = BookingStatus.PENDING

# statuses that still hold the provider's time
ACTIVE_STATUSES = frozenset({
    BookingStatus.PENDING,
    BookingStatus.ACCEPTED,
    BookingStatus.CONFIRMED,
})

TERMINAL_STATUSES = frozenset({
    BookingStatus.REJECTED,
    BookingStatus.COMPLETED,
    BookingStatus.CANCELLED,
})

_TRANSITIONS = {
    BookingStatus.PENDING: frozenset({
        BookingStatus.ACCEPTED, BookingStatus.REJECTED, BookingStatus.CANCELLED,
    }),
    BookingStatus.ACCEPTED: frozenset({
        BookingStatus.CONFIRMED, BookingStatus.REJECTED, BookingStatus.CANCELLED,
    }),
    BookingStatus.CONFIRMED: frozenset({
        BookingStatus.COMPLETED, BookingStatus.CANCELLED,
    }),
}


def allowed_next(status: BookingStatus) -> frozenset:
    return _TRANSITIONS.get(BookingStatus(status), frozenset())


def is_valid_transition(current: BookingStatus, target: BookingStatus) -> bool:
    current, target = BookingStatus(current), BookingStatus(target)
    return current == target or target in allowed_next(current)


def ensure_transition(current: BookingStatus, target: BookingStatus) -> bool:
    """Raise unless current -> target is legal. Returns False for a same-state no-op."""
    current, target = BookingStatus(current), BookingStatus(target)
    if current == target:
        return False
    if target not in allowed_next(current):
        raise InvalidTransitionError(current, target, allowed_next(current))
    return True


def parse_status(name: str) -> BookingStatus:
    value = (name or "").strip().lower()
    # accept the common US spelling too
    if value == "canceled":
        value = BookingStatus.CANCELLED.value
    try:
        return BookingStatus(value)
    except ValueError:
        raise InvalidStatusError(name) from None
