"""Reservation Conflict Checker."""

from collections.abc import Iterable

from cinebook.repositories.bookings import BookingStore


class ReservationConflictChecker:
    """
    Reports which requested seats are already held for a showtime.

    This is a read-only pre-flight filter. It cannot prevent double booking
    by itself: the authoritative re-check happens inside the store's atomic
    reservation step.
    """

    def __init__(self, bookings: BookingStore) -> None:
        self.bookings = bookings

    async def find_conflicts(self, showtime_id: int, seat_ids: Iterable[int]) -> set[int]:
        """
        Args:
            showtime_id: Showtime being booked
            seat_ids: Non-empty set of seats on the showtime's screen

        Returns:
            Ids of seats held by a pending or confirmed booking (empty if all free)
        """
        requested = set(seat_ids)
        if not requested:
            return set()
        return await self.bookings.active_seat_ids(showtime_id, requested) & requested

    async def held_seats(self, showtime_id: int) -> set[int]:
        """Every held seat for a showtime, for rendering seat maps."""
        return await self.bookings.active_seat_ids(showtime_id)
