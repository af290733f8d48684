"""Inventory Store: showtimes and seats as seen by the booking core."""

from collections.abc import Iterable
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cinebook.models import Seat, Showtime


class InventoryStore(Protocol):
    """Read-only view of showtimes and their seating charts."""

    async def get_showtime(self, showtime_id: int) -> Showtime | None: ...

    async def get_seats(self, showtime: Showtime, seat_ids: Iterable[int]) -> list[Seat]: ...

    async def list_seats(self, showtime: Showtime) -> list[Seat]: ...


class SqlInventoryStore:
    """InventoryStore backed by an AsyncSession."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_showtime(self, showtime_id: int) -> Showtime | None:
        """Showtime with its movie and theater loaded, or None."""
        stmt = (
            select(Showtime)
            .options(selectinload(Showtime.movie), selectinload(Showtime.theater))
            .where(Showtime.id == showtime_id)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_seats(self, showtime: Showtime, seat_ids: Iterable[int]) -> list[Seat]:
        """
        Resolve seat ids to active seats on the showtime's screen.

        Ids that are unknown, inactive, or on another screen are silently
        dropped; callers compare counts to detect them.
        """
        stmt = select(Seat).where(
            Seat.id.in_(list(seat_ids)),
            Seat.theater_id == showtime.theater_id,
            Seat.screen_number == showtime.screen_number,
            Seat.is_active.is_(True),
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_seats(self, showtime: Showtime) -> list[Seat]:
        """All active seats on the showtime's screen, by row then column."""
        stmt = (
            select(Seat)
            .where(
                Seat.theater_id == showtime.theater_id,
                Seat.screen_number == showtime.screen_number,
                Seat.is_active.is_(True),
            )
            .order_by(Seat.row_name, Seat.seat_column)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
