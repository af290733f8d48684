"""Ticket endpoints: confirmed, paid bookings."""

from typing import Literal

from fastapi import APIRouter, Depends, Query

from cinebook.api.deps import CurrentUser, get_booking_store, get_current_user
from cinebook.errors import NotFoundError
from cinebook.models.booking import BOOKING_CONFIRMED, PAYMENT_COMPLETED
from cinebook.repositories.bookings import BookingStore
from cinebook.schemas import (
    ApiResponse,
    TicketData,
    TicketGroups,
    TicketListData,
    TicketResponse,
    TicketSummary,
)
from cinebook.services.booking_ledger import utcnow

router = APIRouter()


@router.get("/tickets", response_model=ApiResponse[TicketListData])
async def list_tickets(
    status: Literal["upcoming", "past"] | None = Query(None),
    user: CurrentUser = Depends(get_current_user),
    bookings: BookingStore = Depends(get_booking_store),
) -> ApiResponse[TicketListData]:
    """
    The caller's tickets.

    Without ``status`` the response splits tickets into upcoming and past.
    """
    now = utcnow()
    confirmed = await bookings.list_bookings(
        user.user_id, status=BOOKING_CONFIRMED, payment_status=PAYMENT_COMPLETED
    )
    tickets = [TicketResponse.from_ticket(b, now) for b in confirmed]
    upcoming = [t for t in tickets if t.is_upcoming]
    past = [t for t in tickets if t.is_past]

    if status == "upcoming":
        selected: list[TicketResponse] | TicketGroups = upcoming
    elif status == "past":
        selected = past
    else:
        selected = TicketGroups(upcoming=upcoming, past=past)

    return ApiResponse(
        count=len(tickets),
        data=TicketListData(
            tickets=selected,
            summary=TicketSummary(total=len(tickets), upcoming=len(upcoming), past=len(past)),
        ),
    )


@router.get("/tickets/{booking_id}", response_model=ApiResponse[TicketData])
async def get_ticket(
    booking_id: int,
    user: CurrentUser = Depends(get_current_user),
    bookings: BookingStore = Depends(get_booking_store),
) -> ApiResponse[TicketData]:
    booking = await bookings.get_booking(booking_id)
    if (
        booking is None
        or booking.user_id != user.user_id
        or booking.status != BOOKING_CONFIRMED
        or booking.payment_status != PAYMENT_COMPLETED
    ):
        raise NotFoundError("Ticket not found or does not belong to you")
    return ApiResponse(data=TicketData(ticket=TicketResponse.from_ticket(booking, utcnow())))
