"""Typed failures raised by the booking and search services.

Every error carries a stable code and the HTTP status the API layer maps it
to. Services raise them directly; nothing in the core retries.
"""

from typing import Iterable, Optional


def _name(status) -> str:
    return getattr(status, "value", status)


class BookingError(Exception):
    """Base exception for all booking-core failures."""

    def __init__(self, message: str, code: str, http_status: int = 400):
        super().__init__(message)
        self.message = message
        self.code = code
        self.http_status = http_status

    def details(self) -> dict:
        return {}

    def to_response(self) -> dict:
        body = {"code": self.code, "message": self.message}
        extra = self.details()
        if extra:
            body["details"] = extra
        return {"error": body}


class NotFoundError(BookingError):
    def __init__(self, resource: str, resource_id=None, message: Optional[str] = None):
        if message is None:
            message = f"{resource} not found" if resource_id is None else f"{resource} {resource_id} not found"
        super().__init__(message, "NOT_FOUND", 404)
        self.resource = resource
        self.resource_id = resource_id


class UnauthorizedError(BookingError):
    """The caller lacks the relation the operation requires."""

    def __init__(self, message: str = "You are not allowed to perform this action"):
        super().__init__(message, "UNAUTHORIZED", 403)


class InvalidTransitionError(BookingError):
    """Status precondition violated. Reports the attempted pair and the legal next states."""

    def __init__(self, current, requested, allowed: Iterable = (), message: Optional[str] = None):
        self.current = current
        self.requested = requested
        self.allowed = sorted(_name(s) for s in allowed)
        if message is None:
            allowed_txt = ", ".join(self.allowed) or "none"
            message = f"Invalid transition: {_name(current)} -> {_name(requested)}. Allowed: {allowed_txt}"
        super().__init__(message, "INVALID_TRANSITION", 409)

    def details(self) -> dict:
        return {
            "current": _name(self.current),
            "requested": _name(self.requested) if self.requested is not None else None,
            "allowed": self.allowed,
        }


class BookingNotCompletedError(InvalidTransitionError):
    def __init__(self, current):
        super().__init__(
            current, None, (),
            message="You can review only after the booking is completed.",
        )


class InvalidStatusError(BookingError):
    def __init__(self, value: str):
        super().__init__(f"Invalid status value: {value!r}", "INVALID_STATUS", 400)
        self.value = value


class ValidationFailedError(BookingError):
    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        super().__init__(message, code, 400)


class InvalidIntervalError(ValidationFailedError):
    def __init__(self, start, end):
        super().__init__(f"End time {end} must be after start time {start}", "INVALID_INTERVAL")
        self.start = start
        self.end = end


class InvalidAmountError(ValidationFailedError):
    def __init__(self, message: str = "Invalid booking amount"):
        super().__init__(message, "INVALID_AMOUNT")


class UnapprovedError(BookingError):
    def __init__(self, message: str = "Sitter is not approved"):
        super().__init__(message, "UNAPPROVED", 409)


class ConflictError(BookingError):
    """Overlapping interval or unavailable slot."""

    def __init__(self, message: str = "Time slot already booked", code: str = "CONFLICT"):
        super().__init__(message, code, 409)


class ConcurrencyConflictError(ConflictError):
    def __init__(self, message: str = "Booking was modified concurrently, reload and retry"):
        super().__init__(message, "CONCURRENCY_CONFLICT")


class AlreadyExistsError(BookingError):
    def __init__(self, message: str):
        super().__init__(message, "ALREADY_EXISTS", 409)


class NotCheckedInError(BookingError):
    def __init__(self, message: str = "Not checked in"):
        super().__init__(message, "NOT_CHECKED_IN", 409)
