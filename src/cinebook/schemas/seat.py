"""Pydantic schemas for seat maps and availability checks."""

from pydantic import Field

from cinebook.schemas.catalog import ShowtimeResponse
from cinebook.schemas.common import CamelModel


class SeatView(CamelModel):
    id: int
    seat_number: str
    row_name: str
    seat_column: int
    seat_type: str
    price: float
    is_booked: bool
    is_aisle: bool


class SeatLayout(CamelModel):
    rows: list[str]
    columns: int
    total_seats: int
    available_seats: int
    booked_seats: int


class SeatPricing(CamelModel):
    regular: float
    premium: float


class SeatMapResponse(CamelModel):
    """Everything a client needs to render seat selection for a showtime."""

    showtime: ShowtimeResponse
    seats: list[SeatView]
    seats_by_row: dict[str, list[SeatView]]
    layout: SeatLayout
    pricing: SeatPricing


class SeatCheckRequest(CamelModel):
    seat_ids: list[int] = Field(min_length=1)


class UnavailableSeat(CamelModel):
    id: int
    seat_number: str
