"""Shared test fixtures."""

import asyncio
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

import pytest
from fastapi import FastAPI

from cinebook.errors import SeatConflictError
from cinebook.main import include_api_routers, register_exception_handlers
from cinebook.models import Booking, BookingSeat, Movie, Seat, Showtime, Theater
from cinebook.models.booking import (
    ACTIVE_BOOKING_STATUSES,
    BOOKING_CANCELLED,
    BOOKING_CONFIRMED,
    BOOKING_PENDING,
    PAYMENT_COMPLETED,
    PAYMENT_PENDING,
)
from cinebook.repositories.bookings import ReservationRequest
from cinebook.security import create_access_token
from cinebook.services.booking_ledger import BookingLedger

NOW = datetime.now(timezone.utc).replace(microsecond=0)


# ---------------------------------------------------------------------------
# Catalog factories
# ---------------------------------------------------------------------------


def make_movie(id: int = 1, title: str = "Glass Harbor", status: str = "streaming_now") -> Movie:
    return Movie(
        id=id,
        title=title,
        description="A salvage crew finds something on the seabed.",
        genre="Science Fiction",
        duration=131,
        rating="PG-13",
        score=6.8,
        language="en",
        director="Ingrid Solberg",
        cast=["Noah Brandt", "Ava Kim"],
        poster_url="https://image.tmdb.org/t/p/w500/glass.jpg",
        release_date=datetime(2026, 2, 1, tzinfo=timezone.utc),
        status=status,
        is_active=True,
    )


def make_theater(id: int = 1, name: str = "Grand Cinema Downtown") -> Theater:
    return Theater(
        id=id,
        name=name,
        address="123 Main Street",
        city="New York",
        state="NY",
        zip_code="10001",
        phone="(212) 555-0100",
        screens=2,
    )


def make_showtime(
    movie: Movie,
    theater: Theater,
    id: int = 1,
    show_time: datetime | None = None,
    price_cents: int = 1000,
    screen_number: int = 1,
    is_active: bool = True,
) -> Showtime:
    s = Showtime(
        id=id,
        movie_id=movie.id,
        theater_id=theater.id,
        screen_number=screen_number,
        show_time=show_time or NOW + timedelta(days=2),
        price_cents=price_cents,
        total_seats=6,
        available_seats=6,
        is_active=is_active,
    )
    s.movie = movie
    s.theater = theater
    return s


def make_seat(
    id: int,
    seat_number: str,
    theater_id: int = 1,
    screen_number: int = 1,
    seat_type: str = "regular",
    price_cents: int | None = None,
    is_active: bool = True,
) -> Seat:
    return Seat(
        id=id,
        theater_id=theater_id,
        screen_number=screen_number,
        seat_number=seat_number,
        row_name=seat_number[0],
        seat_column=int(seat_number[1:]),
        seat_type=seat_type,
        price_cents=price_cents,
        is_aisle=False,
        is_active=is_active,
    )


def make_screen_seats() -> list[Seat]:
    """Screen 1: A1-A3 at the showtime price, D4-D6 premium at 15.00; plus one seat on screen 2."""
    return [
        make_seat(1, "A1"),
        make_seat(2, "A2"),
        make_seat(3, "A3"),
        make_seat(4, "D4", seat_type="premium", price_cents=1500),
        make_seat(5, "D5", seat_type="premium", price_cents=1500),
        make_seat(6, "D6", seat_type="premium", price_cents=1500),
        make_seat(7, "Z1", screen_number=2),
        make_seat(8, "A4", is_active=False),
    ]


# ---------------------------------------------------------------------------
# In-memory stores
# ---------------------------------------------------------------------------


class InMemoryInventoryStore:
    """InventoryStore over plain lists."""

    def __init__(self, showtimes: list[Showtime], seats: list[Seat]) -> None:
        self.showtimes = {s.id: s for s in showtimes}
        self.seats = {s.id: s for s in seats}

    def _screen_seats(self, showtime: Showtime) -> list[Seat]:
        return [
            seat
            for seat in self.seats.values()
            if seat.theater_id == showtime.theater_id
            and seat.screen_number == showtime.screen_number
            and seat.is_active
        ]

    async def get_showtime(self, showtime_id: int) -> Showtime | None:
        return self.showtimes.get(showtime_id)

    async def get_seats(self, showtime: Showtime, seat_ids: Iterable[int]) -> list[Seat]:
        wanted = set(seat_ids)
        return [seat for seat in self._screen_seats(showtime) if seat.id in wanted]

    async def list_seats(self, showtime: Showtime) -> list[Seat]:
        return sorted(self._screen_seats(showtime), key=lambda s: (s.row_name, s.seat_column))


class InMemoryBookingStore:
    """
    BookingStore over a dict.

    ``reserve`` holds an asyncio.Lock across its re-check and write, standing
    in for the showtime row lock taken by SqlBookingStore.
    """

    def __init__(self, inventory: InMemoryInventoryStore, now: datetime = NOW) -> None:
        self.inventory = inventory
        self.bookings: dict[int, Booking] = {}
        self.now = now
        self.lock = asyncio.Lock()
        self.reserve_calls = 0

    async def active_seat_ids(
        self, showtime_id: int, seat_ids: Iterable[int] | None = None
    ) -> set[int]:
        held = {
            bs.seat_id
            for booking in self.bookings.values()
            if booking.showtime_id == showtime_id and booking.status in ACTIVE_BOOKING_STATUSES
            for bs in booking.booking_seats
        }
        if seat_ids is None:
            return held
        return held & set(seat_ids)

    async def reference_exists(self, booking_reference: str) -> bool:
        return any(b.booking_reference == booking_reference for b in self.bookings.values())

    async def reserve(self, request: ReservationRequest) -> Booking:
        self.reserve_calls += 1
        async with self.lock:
            taken = await self.active_seat_ids(request.showtime_id, request.seat_ids)
            await asyncio.sleep(0)
            if taken:
                raise SeatConflictError(
                    [s.seat_number for s in request.seats if s.seat_id in taken]
                )
            return self.add_booking(
                user_id=request.user_id,
                showtime_id=request.showtime_id,
                seat_ids=request.seat_ids,
                total_amount_cents=request.total_amount_cents,
                booking_reference=request.booking_reference,
                prices=[s.price_cents for s in request.seats],
            )

    def add_booking(
        self,
        user_id: int,
        showtime_id: int,
        seat_ids: list[int],
        total_amount_cents: int = 2360,
        booking_reference: str | None = None,
        status: str = BOOKING_PENDING,
        payment_status: str = PAYMENT_PENDING,
        payment_reference: str | None = None,
        booking_date: datetime | None = None,
        prices: list[int] | None = None,
    ) -> Booking:
        """Insert a booking directly, bypassing every check."""
        booking_id = len(self.bookings) + 1
        showtime = self.inventory.showtimes[showtime_id]
        booking = Booking(
            id=booking_id,
            user_id=user_id,
            showtime_id=showtime_id,
            booking_reference=booking_reference or f"BK-{booking_id:06X}",
            total_amount_cents=total_amount_cents,
            status=status,
            payment_status=payment_status,
            payment_reference=payment_reference,
            booking_date=booking_date or self.now,
        )
        booking.showtime = showtime
        prices = prices or [1000] * len(seat_ids)
        seats = []
        for seat_id, price in zip(seat_ids, prices):
            bs = BookingSeat(
                booking_id=booking_id,
                seat_id=seat_id,
                showtime_id=showtime_id,
                price_cents=price,
                status="held",
            )
            bs.seat = self.inventory.seats[seat_id]
            seats.append(bs)
        booking.booking_seats = seats
        showtime.available_seats = max(showtime.available_seats - len(seat_ids), 0)
        self.bookings[booking_id] = booking
        return booking

    async def get_booking(self, booking_id: int) -> Booking | None:
        return self.bookings.get(booking_id)

    async def list_bookings(
        self,
        user_id: int,
        status: str | None = None,
        payment_status: str | None = None,
    ) -> list[Booking]:
        found = [
            b
            for b in self.bookings.values()
            if b.user_id == user_id
            and (status is None or b.status == status)
            and (payment_status is None or b.payment_status == payment_status)
        ]
        return sorted(found, key=lambda b: (b.booking_date, b.id), reverse=True)

    async def mark_paid(self, booking_id: int, payment_reference: str) -> bool:
        booking = self.bookings.get(booking_id)
        if booking is None or booking.status != BOOKING_PENDING:
            return False
        booking.status = BOOKING_CONFIRMED
        booking.payment_status = PAYMENT_COMPLETED
        booking.payment_reference = payment_reference
        return True

    async def mark_cancelled(self, booking_id: int) -> bool:
        booking = self.bookings.get(booking_id)
        if booking is None or booking.status != BOOKING_PENDING:
            return False
        booking.status = BOOKING_CANCELLED
        showtime = booking.showtime
        showtime.available_seats = min(
            showtime.available_seats + len(booking.booking_seats), showtime.total_seats
        )
        return True

    async def expire_pending(self, created_before: datetime) -> list[str]:
        expired = []
        for booking in list(self.bookings.values()):
            if booking.status == BOOKING_PENDING and booking.booking_date < created_before:
                await self.mark_cancelled(booking.id)
                expired.append(booking.booking_reference)
        return expired


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def movie() -> Movie:
    return make_movie()


@pytest.fixture
def theater() -> Theater:
    return make_theater()


@pytest.fixture
def inventory(movie: Movie, theater: Theater) -> InMemoryInventoryStore:
    """Showtime 1 upcoming, 2 already started, 3 inactive; all on screen 1."""
    showtimes = [
        make_showtime(movie, theater, id=1),
        make_showtime(movie, theater, id=2, show_time=NOW - timedelta(hours=1)),
        make_showtime(movie, theater, id=3, is_active=False),
    ]
    return InMemoryInventoryStore(showtimes, make_screen_seats())


@pytest.fixture
def booking_store(inventory: InMemoryInventoryStore) -> InMemoryBookingStore:
    return InMemoryBookingStore(inventory)


@pytest.fixture
def ledger(inventory: InMemoryInventoryStore, booking_store: InMemoryBookingStore) -> BookingLedger:
    return BookingLedger(inventory, booking_store, now=lambda: NOW)


@pytest.fixture
def test_app() -> FastAPI:
    """FastAPI app without the APScheduler lifespan or admin mount, for API tests."""
    app = FastAPI()
    register_exception_handlers(app)
    include_api_routers(app)
    return app


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------


def user_headers(user_id: int = 1, email: str = "demo@cinebook.dev") -> dict[str, str]:
    token = create_access_token({"userId": user_id, "email": email})
    return {"Authorization": f"Bearer {token}"}


def admin_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token({'role': 'admin'})}"}
