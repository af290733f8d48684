"""Showtime, seat map and seat availability endpoints."""

import logging
from collections import defaultdict
from datetime import date, datetime, time, timedelta, timezone

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cinebook.api.deps import get_booking_ledger
from cinebook.database import get_db
from cinebook.errors import BookingValidationError, NotFoundError, SeatConflictError
from cinebook.models import Showtime
from cinebook.models.seat import SEAT_TYPES
from cinebook.schemas import (
    ApiResponse,
    SeatCheckRequest,
    SeatLayout,
    SeatMapResponse,
    SeatPricing,
    SeatView,
    ShowtimeDateGroup,
    ShowtimeResponse,
    UnavailableSeat,
)
from cinebook.services.booking_ledger import BookingLedger, utcnow
from cinebook.services.pricing import cents_to_amount

logger = logging.getLogger(__name__)
router = APIRouter()


def _upcoming_showtimes():
    return (
        select(Showtime)
        .options(selectinload(Showtime.movie), selectinload(Showtime.theater))
        .where(Showtime.is_active.is_(True))
        .order_by(Showtime.show_time)
    )


@router.get("/showtimes", response_model=ApiResponse[dict[str, list[ShowtimeResponse]]])
async def list_showtimes(
    movie_id: int | None = Query(None, alias="movieId"),
    theater_id: int | None = Query(None, alias="theaterId"),
    date_param: date | None = Query(None, alias="date", description="Day to list (YYYY-MM-DD)"),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[dict[str, list[ShowtimeResponse]]]:
    """Active showtimes, optionally filtered by movie, theater and day."""
    stmt = _upcoming_showtimes()
    if movie_id is not None:
        stmt = stmt.where(Showtime.movie_id == movie_id)
    if theater_id is not None:
        stmt = stmt.where(Showtime.theater_id == theater_id)
    if date_param is not None:
        day_start = datetime.combine(date_param, time(0, 0), tzinfo=timezone.utc)
        stmt = stmt.where(
            Showtime.show_time >= day_start,
            Showtime.show_time < day_start + timedelta(days=1),
        )
    else:
        stmt = stmt.where(Showtime.show_time >= utcnow())

    result = await db.execute(stmt)
    showtimes = [ShowtimeResponse.from_showtime(s) for s in result.scalars().all()]
    return ApiResponse(count=len(showtimes), data={"showtimes": showtimes})


@router.get(
    "/showtimes/movie/{movie_id}/dates",
    response_model=ApiResponse[dict[str, list[ShowtimeDateGroup]]],
)
async def list_showtime_dates(
    movie_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[dict[str, list[ShowtimeDateGroup]]]:
    """Upcoming showtimes for a movie grouped by calendar day (UTC)."""
    stmt = _upcoming_showtimes().where(
        Showtime.movie_id == movie_id,
        Showtime.show_time >= utcnow(),
    )
    result = await db.execute(stmt)

    by_date: dict[str, list[ShowtimeResponse]] = defaultdict(list)
    for showtime in result.scalars().all():
        day = showtime.show_time.astimezone(timezone.utc).date().isoformat()
        by_date[day].append(ShowtimeResponse.from_showtime(showtime))

    dates = [
        ShowtimeDateGroup(date=day, showtimes=items, count=len(items))
        for day, items in by_date.items()
    ]
    return ApiResponse(data={"dates": dates})


@router.get("/showtimes/{showtime_id}", response_model=ApiResponse[dict[str, ShowtimeResponse]])
async def get_showtime(
    showtime_id: int,
    ledger: BookingLedger = Depends(get_booking_ledger),
) -> ApiResponse[dict[str, ShowtimeResponse]]:
    showtime = await ledger.inventory.get_showtime(showtime_id)
    if showtime is None:
        raise NotFoundError("Showtime not found")
    if showtime.has_started(ledger.now()):
        raise BookingValidationError("This showtime has already passed")
    return ApiResponse(data={"showtime": ShowtimeResponse.from_showtime(showtime)})


@router.get("/showtimes/{showtime_id}/seats", response_model=ApiResponse[SeatMapResponse])
async def get_seat_map(
    showtime_id: int,
    ledger: BookingLedger = Depends(get_booking_ledger),
) -> ApiResponse[SeatMapResponse]:
    """
    Seat chart for a showtime with per-seat availability.

    A seat is booked when a pending or confirmed booking holds it.
    """
    showtime = await ledger.load_bookable_showtime(showtime_id)
    seats = await ledger.inventory.list_seats(showtime)
    held = await ledger.conflicts.held_seats(showtime.id)

    views = [
        SeatView(
            id=seat.id,
            seat_number=seat.seat_number,
            row_name=seat.row_name,
            seat_column=seat.seat_column,
            seat_type=seat.seat_type,
            price=cents_to_amount(seat.effective_price_cents(showtime.price_cents)),
            is_booked=seat.id in held,
            is_aisle=seat.is_aisle,
        )
        for seat in seats
    ]

    seats_by_row: dict[str, list[SeatView]] = defaultdict(list)
    for view in views:
        seats_by_row[view.row_name].append(view)

    booked_count = sum(1 for view in views if view.is_booked)

    def type_price(seat_type: str) -> float:
        for seat in seats:
            if seat.seat_type == seat_type:
                return cents_to_amount(seat.effective_price_cents(showtime.price_cents))
        return cents_to_amount(showtime.price_cents)

    return ApiResponse(
        data=SeatMapResponse(
            showtime=ShowtimeResponse.from_showtime(showtime),
            seats=views,
            seats_by_row=dict(seats_by_row),
            layout=SeatLayout(
                rows=sorted(seats_by_row),
                columns=max((seat.seat_column for seat in seats), default=0),
                total_seats=len(views),
                available_seats=len(views) - booked_count,
                booked_seats=booked_count,
            ),
            pricing=SeatPricing(**{seat_type: type_price(seat_type) for seat_type in SEAT_TYPES}),
        )
    )


@router.post("/showtimes/{showtime_id}/seats/check", response_model=ApiResponse[None])
async def check_seats(
    showtime_id: int,
    request: SeatCheckRequest,
    ledger: BookingLedger = Depends(get_booking_ledger),
) -> ApiResponse[None]:
    """Pre-flight availability check; answers 409 listing any held seats."""
    showtime = await ledger.load_bookable_showtime(showtime_id)
    seats = await ledger.resolve_seats(showtime, request.seat_ids)
    conflicts = await ledger.conflicts.find_conflicts(showtime.id, request.seat_ids)
    if conflicts:
        unavailable = [
            UnavailableSeat(id=seat.id, seat_number=seat.seat_number)
            for seat in seats
            if seat.id in conflicts
        ]
        raise SeatConflictError(
            [seat.seat_number for seat in unavailable],
            data={"unavailableSeats": [seat.model_dump(by_alias=True) for seat in unavailable]},
        )
    return ApiResponse(message="All seats are available")
