"""Scheduled sweep that cancels abandoned pending bookings."""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.exc import SQLAlchemyError

from cinebook.config import settings
from cinebook.database import AsyncSessionLocal
from cinebook.repositories.bookings import BookingStore, SqlBookingStore

logger = logging.getLogger(__name__)


async def expire_stale_bookings(
    store: BookingStore,
    ttl_minutes: int,
    now: datetime | None = None,
) -> list[str]:
    """
    Cancel pending bookings older than ``ttl_minutes``.

    Their seats become selectable again as soon as the status changes.
    Returns the references of the expired bookings.
    """
    if ttl_minutes <= 0:
        return []

    cutoff = (now or datetime.now(timezone.utc)) - timedelta(minutes=ttl_minutes)
    expired = await store.expire_pending(cutoff)
    if expired:
        logger.info(f"Expired {len(expired)} pending booking(s): {', '.join(expired)}")
    return expired


async def run_expiry_sweep() -> None:
    """Scheduler entry point; opens its own session outside any request."""
    if settings.pending_booking_ttl_minutes <= 0:
        return

    async with AsyncSessionLocal() as db:
        try:
            await expire_stale_bookings(SqlBookingStore(db), settings.pending_booking_ttl_minutes)
        except SQLAlchemyError as e:
            logger.error(f"Pending booking sweep failed: {e}", exc_info=True)
            await db.rollback()
