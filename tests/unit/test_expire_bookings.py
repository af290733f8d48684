"""Tests for the pending-booking expiry sweep."""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch

from conftest import NOW, InMemoryBookingStore, InMemoryInventoryStore

from cinebook.models.booking import BOOKING_CANCELLED, BOOKING_CONFIRMED, BOOKING_PENDING
from cinebook.tasks import expire_bookings
from cinebook.tasks.expire_bookings import expire_stale_bookings


async def test_expires_only_old_pending_bookings(
    booking_store: InMemoryBookingStore, inventory: InMemoryInventoryStore
) -> None:
    stale = booking_store.add_booking(
        user_id=1, showtime_id=1, seat_ids=[1, 2], booking_date=NOW - timedelta(minutes=20)
    )
    fresh = booking_store.add_booking(
        user_id=1, showtime_id=1, seat_ids=[3], booking_date=NOW - timedelta(minutes=5)
    )
    paid = booking_store.add_booking(
        user_id=1,
        showtime_id=1,
        seat_ids=[4],
        status=BOOKING_CONFIRMED,
        booking_date=NOW - timedelta(hours=2),
    )

    expired = await expire_stale_bookings(booking_store, ttl_minutes=15, now=NOW)

    assert expired == [stale.booking_reference]
    assert stale.status == BOOKING_CANCELLED
    assert fresh.status == BOOKING_PENDING
    assert paid.status == BOOKING_CONFIRMED
    assert await booking_store.active_seat_ids(1) == {3, 4}
    assert inventory.showtimes[1].available_seats == 4


async def test_zero_ttl_disables_expiry(booking_store: InMemoryBookingStore) -> None:
    booking = booking_store.add_booking(
        user_id=1, showtime_id=1, seat_ids=[1], booking_date=NOW - timedelta(days=1)
    )

    assert await expire_stale_bookings(booking_store, ttl_minutes=0, now=NOW) == []
    assert booking.status == BOOKING_PENDING


async def test_run_expiry_sweep_uses_its_own_session() -> None:
    db = AsyncMock()
    session_ctx = MagicMock()
    session_ctx.__aenter__ = AsyncMock(return_value=db)
    session_ctx.__aexit__ = AsyncMock(return_value=False)

    with (
        patch.object(expire_bookings, "AsyncSessionLocal", return_value=session_ctx),
        patch.object(expire_bookings, "expire_stale_bookings", new=AsyncMock()) as expire,
        patch.object(expire_bookings.settings, "pending_booking_ttl_minutes", 15),
    ):
        await expire_bookings.run_expiry_sweep()

    store, ttl = expire.await_args.args
    assert store.db is db
    assert ttl == 15
