"""Booking status state machine: the transition table is the only source of truth."""

import pytest

from app.core.booking_workflow import (
    ACTIVE_STATUSES,
    BookingStatus,
    TERMINAL_STATUSES,
    allowed_next,
    ensure_transition,
    is_valid_transition,
    parse_status,
)
from app.core.errors import InvalidStatusError, InvalidTransitionError

S = BookingStatus

LEGAL = {
    (S.PENDING, S.ACCEPTED), (S.PENDING, S.REJECTED), (S.PENDING, S.CANCELLED),
    (S.ACCEPTED, S.CONFIRMED), (S.ACCEPTED, S.REJECTED), (S.ACCEPTED, S.CANCELLED),
    (S.CONFIRMED, S.COMPLETED), (S.CONFIRMED, S.CANCELLED),
}

ILLEGAL = [
    (a, b) for a in S for b in S
    if a != b and (a, b) not in LEGAL
]


@pytest.mark.parametrize("current,target", sorted(LEGAL))
def test_table_pairs_are_valid(current, target):
    assert is_valid_transition(current, target)
    assert ensure_transition(current, target) is True


@pytest.mark.parametrize("current,target", ILLEGAL)
def test_pairs_outside_table_raise(current, target):
    assert not is_valid_transition(current, target)
    with pytest.raises(InvalidTransitionError) as exc_info:
        ensure_transition(current, target)
    err = exc_info.value
    assert err.code == "INVALID_TRANSITION"
    assert err.http_status == 409
    assert err.details()["current"] == current.value
    assert err.details()["requested"] == target.value


@pytest.mark.parametrize("status", list(S))
def test_same_state_is_noop(status):
    assert is_valid_transition(status, status)
    assert ensure_transition(status, status) is False


@pytest.mark.parametrize("status", sorted(TERMINAL_STATUSES))
def test_terminal_statuses_allow_nothing(status):
    assert allowed_next(status) == frozenset()


def test_active_and_terminal_partition_all_statuses():
    assert ACTIVE_STATUSES | TERMINAL_STATUSES == set(S)
    assert not ACTIVE_STATUSES & TERMINAL_STATUSES


def test_error_lists_allowed_next_states():
    with pytest.raises(InvalidTransitionError) as exc_info:
        ensure_transition(S.CONFIRMED, S.PENDING)
    assert exc_info.value.details()["allowed"] == ["cancelled", "completed"]


def test_transition_accepts_raw_strings():
    assert is_valid_transition("pending", "accepted")


@pytest.mark.parametrize("raw,expected", [
    ("pending", S.PENDING),
    ("Accepted", S.ACCEPTED),
    ("  CONFIRMED ", S.CONFIRMED),
    ("canceled", S.CANCELLED),
    ("Cancelled", S.CANCELLED),
])
def test_parse_status(raw, expected):
    assert parse_status(raw) == expected


@pytest.mark.parametrize("raw", ["", "done", "paid"])
def test_parse_status_rejects_unknown(raw):
    with pytest.raises(InvalidStatusError):
        parse_status(raw)
