"""Booking Ledger: booking creation, lookup and cancellation."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from cinebook.errors import (
    BookingValidationError,
    ForbiddenError,
    NotFoundError,
    SeatConflictError,
)
from cinebook.models import Booking, Seat, Showtime
from cinebook.models.booking import BOOKING_CANCELLED, BOOKING_CONFIRMED
from cinebook.repositories.bookings import BookingStore, ReservationRequest, ReservedSeat
from cinebook.repositories.inventory import InventoryStore
from cinebook.services.conflicts import ReservationConflictChecker
from cinebook.services.pricing import PriceBreakdown, PricingCalculator
from cinebook.services.references import ReferenceGenerator

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CreatedBooking:
    booking: Booking
    pricing: PriceBreakdown


class BookingLedger:
    """
    State machine for bookings.

    pending -> confirmed (payment) or pending -> cancelled (user or expiry).
    Confirmed and cancelled are terminal.
    """

    def __init__(
        self,
        inventory: InventoryStore,
        bookings: BookingStore,
        pricing: PricingCalculator | None = None,
        references: ReferenceGenerator | None = None,
        now: Callable[[], datetime] = utcnow,
    ) -> None:
        self.inventory = inventory
        self.bookings = bookings
        self.conflicts = ReservationConflictChecker(bookings)
        self.pricing = pricing or PricingCalculator()
        self.references = references or ReferenceGenerator(bookings.reference_exists)
        self.now = now

    async def load_bookable_showtime(self, showtime_id: int) -> Showtime:
        """Showtime that exists, is active and has not started."""
        showtime = await self.inventory.get_showtime(showtime_id)
        if showtime is None or not showtime.is_active:
            raise NotFoundError("Showtime not found")
        if showtime.has_started(self.now()):
            raise BookingValidationError("Cannot book seats for past showtimes")
        return showtime

    async def resolve_seats(self, showtime: Showtime, seat_ids: list[int]) -> list[Seat]:
        """Seats on the showtime's screen; every requested id must resolve."""
        if not seat_ids:
            raise BookingValidationError("seatIds must be a non-empty array")
        if len(set(seat_ids)) != len(seat_ids):
            raise BookingValidationError("seatIds must not contain duplicates")

        seats = await self.inventory.get_seats(showtime, seat_ids)
        if len(seats) != len(seat_ids):
            raise BookingValidationError("Some seats are invalid or do not exist")
        return seats

    async def create_booking(
        self, user_id: int, showtime_id: int, seat_ids: list[int]
    ) -> CreatedBooking:
        """
        Reserve seats for a showtime as a pending booking.

        Raises:
            NotFoundError: showtime missing or inactive
            BookingValidationError: past showtime, empty/duplicate/foreign seats
            SeatConflictError: a seat is held by another active booking
            ServiceUnavailableError: no unique reference could be generated
        """
        showtime = await self.load_bookable_showtime(showtime_id)
        seats = await self.resolve_seats(showtime, seat_ids)

        # Pre-flight only; reserve() re-checks under the showtime lock.
        conflicts = await self.conflicts.find_conflicts(showtime.id, seat_ids)
        if conflicts:
            raise SeatConflictError([s.seat_number for s in seats if s.id in conflicts])

        prices = [seat.effective_price_cents(showtime.price_cents) for seat in seats]
        pricing = self.pricing.calculate(prices)
        reference = await self.references.booking_reference()

        booking = await self.bookings.reserve(
            ReservationRequest(
                user_id=user_id,
                showtime_id=showtime.id,
                booking_reference=reference,
                total_amount_cents=pricing.total_cents,
                seats=[
                    ReservedSeat(seat_id=seat.id, seat_number=seat.seat_number, price_cents=price)
                    for seat, price in zip(seats, prices)
                ],
            )
        )
        logger.info(
            f"Booking {booking.booking_reference} created for user {user_id}: "
            f"showtime {showtime.id}, {len(seats)} seat(s), total {pricing.total_cents}c"
        )
        return CreatedBooking(booking=booking, pricing=pricing)

    async def get_booking(self, user_id: int, booking_id: int) -> Booking:
        """Booking owned by ``user_id``; other users' bookings look missing."""
        booking = await self.bookings.get_booking(booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        if booking.user_id != user_id:
            raise ForbiddenError("Booking not found")
        return booking

    async def list_bookings(self, user_id: int) -> list[Booking]:
        return await self.bookings.list_bookings(user_id)

    async def cancel_booking(self, user_id: int, booking_id: int) -> Booking:
        """
        Cancel a pending booking, which releases its seats immediately.

        Raises:
            NotFoundError: booking missing or owned by someone else
            BookingValidationError: already cancelled, already paid, or showtime passed
        """
        booking = await self.get_booking(user_id, booking_id)
        self._ensure_cancellable(booking)

        if not await self.bookings.mark_cancelled(booking.id):
            # Lost a race with payment, expiry or another cancel.
            booking = await self.get_booking(user_id, booking_id)
            self._ensure_cancellable(booking)
            raise BookingValidationError("Booking can no longer be cancelled")

        logger.info(f"Booking {booking.booking_reference} cancelled by user {user_id}")
        return await self.get_booking(user_id, booking_id)

    def _ensure_cancellable(self, booking: Booking) -> None:
        if booking.status == BOOKING_CANCELLED:
            raise BookingValidationError("Booking is already cancelled")
        if booking.showtime.has_started(self.now()):
            raise BookingValidationError("Cannot cancel bookings for past showtimes")
        if booking.status == BOOKING_CONFIRMED:
            raise BookingValidationError("Confirmed bookings cannot be cancelled")
