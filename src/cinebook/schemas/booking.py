"""Pydantic schemas for bookings, payments and tickets."""

from datetime import datetime

from pydantic import Field, field_validator
from pydantic_core import PydanticCustomError

from cinebook.models import Booking
from cinebook.schemas.catalog import MovieSummary, TheaterSummary
from cinebook.schemas.common import CamelModel
from cinebook.services.pricing import PriceBreakdown, cents_to_amount


class CreateBookingRequest(CamelModel):
    showtime_id: int
    seat_ids: list[int] = Field(min_length=1)


class BookedSeat(CamelModel):
    seat_number: str
    row_name: str
    seat_column: int
    seat_type: str
    price: float


class BookingShowtime(CamelModel):
    id: int
    show_time: datetime
    screen_number: int
    price: float


class PricingResponse(CamelModel):
    subtotal: float
    service_fee: float
    tax: float
    total: float

    @classmethod
    def from_breakdown(cls, breakdown: PriceBreakdown) -> "PricingResponse":
        return cls(
            subtotal=cents_to_amount(breakdown.subtotal_cents),
            service_fee=cents_to_amount(breakdown.service_fee_cents),
            tax=cents_to_amount(breakdown.tax_cents),
            total=cents_to_amount(breakdown.total_cents),
        )


class BookingResponse(CamelModel):
    """Booking joined with its showtime, movie, theater and seats."""

    id: int
    booking_reference: str
    status: str
    payment_status: str
    payment_reference: str | None = None
    total_amount: float
    booking_date: datetime | None = None
    showtime: BookingShowtime
    movie: MovieSummary
    theater: TheaterSummary
    seats: list[BookedSeat]
    seat_count: int
    pricing: PricingResponse | None = None

    @classmethod
    def from_booking(
        cls, booking: Booking, pricing: PriceBreakdown | None = None
    ) -> "BookingResponse":
        showtime = booking.showtime
        return cls(
            id=booking.id,
            booking_reference=booking.booking_reference,
            status=booking.status,
            payment_status=booking.payment_status,
            payment_reference=booking.payment_reference,
            total_amount=cents_to_amount(booking.total_amount_cents),
            booking_date=booking.booking_date,
            showtime=BookingShowtime(
                id=showtime.id,
                show_time=showtime.show_time,
                screen_number=showtime.screen_number,
                price=cents_to_amount(showtime.price_cents),
            ),
            movie=MovieSummary.model_validate(showtime.movie),
            theater=TheaterSummary.model_validate(showtime.theater),
            seats=[
                BookedSeat(
                    seat_number=bs.seat.seat_number,
                    row_name=bs.seat.row_name,
                    seat_column=bs.seat.seat_column,
                    seat_type=bs.seat.seat_type,
                    price=cents_to_amount(bs.price_cents),
                )
                for bs in booking.booking_seats
            ],
            seat_count=len(booking.booking_seats),
            pricing=PricingResponse.from_breakdown(pricing) if pricing else None,
        )


class BookingEnvelopeData(CamelModel):
    booking: BookingResponse


class BookingListData(CamelModel):
    bookings: list[BookingResponse]


class PaymentRequest(CamelModel):
    """
    Mock payment request.

    Card fields are accepted for realism but never validated or stored.
    """

    amount: float | None = Field(None, strict=True)
    payment_method: str = "credit_card"
    card_number: str | None = None
    expiry_date: str | None = None
    cvv: str | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def amount_must_be_a_number(cls, value):
        # Numeric strings and booleans are not amounts
        if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float))):
            raise PydanticCustomError("amount_type", "Amount is required and must be a number")
        return value


class PaymentResponse(CamelModel):
    payment_reference: str | None
    amount: float
    status: str
    payment_method: str | None = None
    processed_at: datetime | None = None


class PaymentData(CamelModel):
    payment: PaymentResponse | None
    booking: BookingResponse


class TimeUntilShow(CamelModel):
    days: int
    hours: int
    total_milliseconds: int


class TicketResponse(BookingResponse):
    """Confirmed, paid booking presented as an admission ticket."""

    qr_code: str
    is_upcoming: bool
    is_past: bool
    time_until_show: TimeUntilShow | None = None

    @classmethod
    def from_ticket(cls, booking: Booking, now: datetime) -> "TicketResponse":
        base = BookingResponse.from_booking(booking)
        show_time = booking.showtime.show_time
        is_upcoming = show_time > now
        time_until_show = None
        if is_upcoming:
            remaining = show_time - now
            time_until_show = TimeUntilShow(
                days=remaining.days,
                hours=remaining.seconds // 3600,
                total_milliseconds=int(remaining.total_seconds() * 1000),
            )
        return cls(
            **base.model_dump(),
            qr_code=booking.booking_reference,
            is_upcoming=is_upcoming,
            is_past=not is_upcoming,
            time_until_show=time_until_show,
        )


class TicketSummary(CamelModel):
    total: int
    upcoming: int
    past: int


class TicketGroups(CamelModel):
    upcoming: list[TicketResponse]
    past: list[TicketResponse]


class TicketListData(CamelModel):
    tickets: list[TicketResponse] | TicketGroups
    summary: TicketSummary


class TicketData(CamelModel):
    ticket: TicketResponse
