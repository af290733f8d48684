"""Pydantic schemas for API requests and responses."""

from cinebook.schemas.admin import AdminLoginRequest, AdminToken, DashboardStats
from cinebook.schemas.auth import AuthData, LoginRequest, ProfileData, RegisterRequest, UserProfile
from cinebook.schemas.booking import (
    BookingEnvelopeData,
    BookingListData,
    BookingResponse,
    CreateBookingRequest,
    PaymentData,
    PaymentRequest,
    PaymentResponse,
    PricingResponse,
    TicketData,
    TicketGroups,
    TicketListData,
    TicketResponse,
    TicketSummary,
)
from cinebook.schemas.catalog import (
    MovieResponse,
    MovieSummary,
    MovieWithShowtimes,
    ShowtimeDateGroup,
    ShowtimeResponse,
    TheaterSummary,
)
from cinebook.schemas.common import ApiResponse, CamelModel
from cinebook.schemas.seat import (
    SeatCheckRequest,
    SeatLayout,
    SeatMapResponse,
    SeatPricing,
    SeatView,
    UnavailableSeat,
)

__all__ = [
    "AdminLoginRequest",
    "AdminToken",
    "ApiResponse",
    "AuthData",
    "BookingEnvelopeData",
    "BookingListData",
    "BookingResponse",
    "CamelModel",
    "CreateBookingRequest",
    "DashboardStats",
    "LoginRequest",
    "MovieResponse",
    "MovieSummary",
    "MovieWithShowtimes",
    "PaymentData",
    "PaymentRequest",
    "PaymentResponse",
    "PricingResponse",
    "ProfileData",
    "RegisterRequest",
    "SeatCheckRequest",
    "SeatLayout",
    "SeatMapResponse",
    "SeatPricing",
    "SeatView",
    "ShowtimeDateGroup",
    "ShowtimeResponse",
    "TheaterSummary",
    "TicketData",
    "TicketGroups",
    "TicketListData",
    "TicketResponse",
    "TicketSummary",
    "UnavailableSeat",
    "UserProfile",
]
