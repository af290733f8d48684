"""Booking-core error taxonomy.

Every error carries the HTTP status and the message rendered in the
``{success: false, message, data}`` envelope by the handlers in ``main``.
"""

from typing import Any


class BookingError(Exception):
    """Base class for errors raised by the booking core."""

    status_code = 500
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None, data: dict[str, Any] | None = None) -> None:
        self.message = message or self.default_message
        self.data = data
        super().__init__(self.message)


class BookingValidationError(BookingError):
    """Malformed or missing input, or a request the booking state forbids."""

    status_code = 400
    default_message = "Invalid request"


class NotFoundError(BookingError):
    """Entity absent or not visible to the caller."""

    status_code = 404
    default_message = "Not found"


class ForbiddenError(NotFoundError):
    """Ownership mismatch, reported exactly like a missing entity."""


class SeatConflictError(BookingError):
    """One or more requested seats are held by an active booking."""

    status_code = 409
    default_message = "Some seats are already booked"

    def __init__(
        self,
        seat_numbers: list[str],
        message: str | None = None,
        data: dict[str, Any] | None = None,
    ) -> None:
        self.seat_numbers = seat_numbers
        super().__init__(message, data=data or {"bookedSeats": seat_numbers})


class ServiceUnavailableError(BookingError):
    """A downstream dependency failed or a bounded retry was exhausted."""

    status_code = 500
    default_message = "Service temporarily unavailable"
