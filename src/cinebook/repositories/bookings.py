"""Booking ledger persistence: conflict queries and atomic state changes."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cinebook.errors import NotFoundError, SeatConflictError, ServiceUnavailableError
from cinebook.models import Booking, BookingSeat, Showtime
from cinebook.models.booking import (
    ACTIVE_BOOKING_STATUSES,
    BOOKING_CANCELLED,
    BOOKING_CONFIRMED,
    BOOKING_PENDING,
    PAYMENT_COMPLETED,
    PAYMENT_PENDING,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReservedSeat:
    seat_id: int
    seat_number: str
    price_cents: int


@dataclass
class ReservationRequest:
    """Everything the atomic reservation step needs to persist a booking."""

    user_id: int
    showtime_id: int
    booking_reference: str
    total_amount_cents: int
    seats: list[ReservedSeat] = field(default_factory=list)

    @property
    def seat_ids(self) -> list[int]:
        return [s.seat_id for s in self.seats]


class BookingStore(Protocol):
    """Persistence operations the booking ledger and payment path rely on."""

    async def active_seat_ids(
        self, showtime_id: int, seat_ids: Iterable[int] | None = None
    ) -> set[int]: ...

    async def reference_exists(self, booking_reference: str) -> bool: ...

    async def reserve(self, request: ReservationRequest) -> Booking: ...

    async def get_booking(self, booking_id: int) -> Booking | None: ...

    async def list_bookings(
        self,
        user_id: int,
        status: str | None = None,
        payment_status: str | None = None,
    ) -> list[Booking]: ...

    async def mark_paid(self, booking_id: int, payment_reference: str) -> bool: ...

    async def mark_cancelled(self, booking_id: int) -> bool: ...

    async def expire_pending(self, created_before: datetime) -> list[str]: ...


class SqlBookingStore:
    """
    BookingStore backed by an AsyncSession.

    A seat is held for a showtime while a BookingSeat for it belongs to a
    booking whose status is pending or confirmed. Cancelling the booking is
    therefore enough to release its seats; no seat row is ever updated.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def active_seat_ids(
        self, showtime_id: int, seat_ids: Iterable[int] | None = None
    ) -> set[int]:
        """
        Seats held by active bookings for a showtime.

        Args:
            showtime_id: Showtime to check
            seat_ids: Restrict the check to these seats (all seats if None)

        Returns:
            Ids of held seats
        """
        stmt = (
            select(BookingSeat.seat_id)
            .join(Booking, BookingSeat.booking_id == Booking.id)
            .where(
                BookingSeat.showtime_id == showtime_id,
                Booking.showtime_id == showtime_id,
                Booking.status.in_(ACTIVE_BOOKING_STATUSES),
            )
        )
        if seat_ids is not None:
            stmt = stmt.where(BookingSeat.seat_id.in_(list(seat_ids)))

        result = await self.db.execute(stmt)
        return set(result.scalars().all())

    async def reference_exists(self, booking_reference: str) -> bool:
        stmt = select(Booking.id).where(Booking.booking_reference == booking_reference)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def reserve(self, request: ReservationRequest) -> Booking:
        """
        Atomically re-check the seats and persist the booking with its seats.

        The showtime row is locked first, so concurrent reservations for the
        same showtime run one after another, each seeing the seats committed
        by the previous one. Nothing is persisted if any seat is taken.

        Raises:
            SeatConflictError: a seat was taken since the pre-flight check
            NotFoundError: the showtime disappeared
            ServiceUnavailableError: the insert violated a constraint
        """
        try:
            locked = await self.db.execute(
                select(Showtime.id).where(Showtime.id == request.showtime_id).with_for_update()
            )
            if locked.scalar_one_or_none() is None:
                raise NotFoundError("Showtime not found")

            taken = await self.active_seat_ids(request.showtime_id, request.seat_ids)
            if taken:
                seat_numbers = [s.seat_number for s in request.seats if s.seat_id in taken]
                logger.warning(
                    f"Reservation race lost for showtime {request.showtime_id}: {seat_numbers}"
                )
                raise SeatConflictError(seat_numbers)

            booking = Booking(
                user_id=request.user_id,
                showtime_id=request.showtime_id,
                booking_reference=request.booking_reference,
                total_amount_cents=request.total_amount_cents,
                status=BOOKING_PENDING,
                payment_status=PAYMENT_PENDING,
            )
            booking.booking_seats = [
                BookingSeat(
                    seat_id=seat.seat_id,
                    showtime_id=request.showtime_id,
                    price_cents=seat.price_cents,
                    status="held",
                )
                for seat in request.seats
            ]
            self.db.add(booking)

            await self.db.execute(
                update(Showtime)
                .where(Showtime.id == request.showtime_id)
                .values(
                    available_seats=func.greatest(
                        Showtime.available_seats - len(request.seats), 0
                    )
                )
            )
            await self.db.flush()
            booking_id = booking.id
            await self.db.commit()

        except (SeatConflictError, NotFoundError):
            await self.db.rollback()
            raise
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(f"Integrity error reserving {request.booking_reference}: {e}")
            raise ServiceUnavailableError("Could not save booking, please retry") from e

        created = await self.get_booking(booking_id)
        if created is None:
            raise ServiceUnavailableError("Booking was saved but could not be reloaded")
        return created

    async def get_booking(self, booking_id: int) -> Booking | None:
        """Booking with showtime, movie, theater and seats loaded."""
        stmt = (
            select(Booking)
            .options(
                selectinload(Booking.showtime).selectinload(Showtime.movie),
                selectinload(Booking.showtime).selectinload(Showtime.theater),
                selectinload(Booking.booking_seats).selectinload(BookingSeat.seat),
            )
            .where(Booking.id == booking_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_bookings(
        self,
        user_id: int,
        status: str | None = None,
        payment_status: str | None = None,
    ) -> list[Booking]:
        """A user's bookings, most recent first."""
        stmt = (
            select(Booking)
            .options(
                selectinload(Booking.showtime).selectinload(Showtime.movie),
                selectinload(Booking.showtime).selectinload(Showtime.theater),
                selectinload(Booking.booking_seats).selectinload(BookingSeat.seat),
            )
            .where(Booking.user_id == user_id)
            .order_by(Booking.booking_date.desc(), Booking.id.desc())
        )
        if status is not None:
            stmt = stmt.where(Booking.status == status)
        if payment_status is not None:
            stmt = stmt.where(Booking.payment_status == payment_status)

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def mark_paid(self, booking_id: int, payment_reference: str) -> bool:
        """
        Flip a pending booking to confirmed/completed.

        Returns:
            False if the booking was no longer pending
        """
        result = await self.db.execute(
            update(Booking)
            .where(Booking.id == booking_id, Booking.status == BOOKING_PENDING)
            .values(
                status=BOOKING_CONFIRMED,
                payment_status=PAYMENT_COMPLETED,
                payment_reference=payment_reference,
            )
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        return result.rowcount == 1

    async def mark_cancelled(self, booking_id: int) -> bool:
        """
        Cancel a pending booking, releasing its seats.

        Returns:
            False if the booking was no longer pending
        """
        cancelled = await self._cancel(booking_id)
        await self.db.commit()
        return cancelled

    async def expire_pending(self, created_before: datetime) -> list[str]:
        """
        Cancel pending bookings created before a cutoff; returns their references.

        Each cancellation commits on its own so no showtime lock is held while
        the next booking row is locked.
        """
        result = await self.db.execute(
            select(Booking.id, Booking.booking_reference).where(
                Booking.status == BOOKING_PENDING,
                Booking.booking_date < created_before,
            )
        )
        expired: list[str] = []
        for booking_id, reference in result.all():
            cancelled = await self._cancel(booking_id)
            await self.db.commit()
            if cancelled:
                expired.append(reference)

        return expired

    async def _cancel(self, booking_id: int) -> bool:
        result = await self.db.execute(
            update(Booking)
            .where(Booking.id == booking_id, Booking.status == BOOKING_PENDING)
            .values(status=BOOKING_CANCELLED)
            .returning(Booking.showtime_id)
            .execution_options(synchronize_session=False)
        )
        showtime_id = result.scalar_one_or_none()
        if showtime_id is None:
            return False

        seat_count = await self.db.execute(
            select(func.count()).select_from(BookingSeat).where(BookingSeat.booking_id == booking_id)
        )
        released = seat_count.scalar_one()
        await self.db.execute(
            update(Showtime)
            .where(Showtime.id == showtime_id)
            .values(
                available_seats=func.least(
                    Showtime.available_seats + released, Showtime.total_seats
                )
            )
        )
        return True
