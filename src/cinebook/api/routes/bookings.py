"""Booking and payment API endpoints."""

import logging

from fastapi import APIRouter, Depends, status

from cinebook.api.deps import (
    CurrentUser,
    get_booking_ledger,
    get_current_user,
    get_payment_simulator,
)
from cinebook.schemas import (
    ApiResponse,
    BookingEnvelopeData,
    BookingListData,
    BookingResponse,
    CreateBookingRequest,
    PaymentData,
    PaymentRequest,
    PaymentResponse,
)
from cinebook.services.booking_ledger import BookingLedger
from cinebook.services.payments import PaymentSimulator
from cinebook.services.pricing import cents_to_amount

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "/bookings",
    response_model=ApiResponse[BookingEnvelopeData],
    status_code=status.HTTP_201_CREATED,
)
async def create_booking(
    request: CreateBookingRequest,
    user: CurrentUser = Depends(get_current_user),
    ledger: BookingLedger = Depends(get_booking_ledger),
) -> ApiResponse[BookingEnvelopeData]:
    """
    Reserve seats for a showtime.

    The booking starts pending and holds its seats until it is paid,
    cancelled, or expires.
    """
    created = await ledger.create_booking(user.user_id, request.showtime_id, request.seat_ids)
    return ApiResponse(
        message="Booking created successfully",
        data=BookingEnvelopeData(
            booking=BookingResponse.from_booking(created.booking, created.pricing)
        ),
    )


@router.get("/bookings", response_model=ApiResponse[BookingListData])
async def list_bookings(
    user: CurrentUser = Depends(get_current_user),
    ledger: BookingLedger = Depends(get_booking_ledger),
) -> ApiResponse[BookingListData]:
    """All of the caller's bookings, most recent first."""
    bookings = await ledger.list_bookings(user.user_id)
    return ApiResponse(
        count=len(bookings),
        data=BookingListData(bookings=[BookingResponse.from_booking(b) for b in bookings]),
    )


@router.get("/bookings/{booking_id}", response_model=ApiResponse[BookingEnvelopeData])
async def get_booking(
    booking_id: int,
    user: CurrentUser = Depends(get_current_user),
    ledger: BookingLedger = Depends(get_booking_ledger),
) -> ApiResponse[BookingEnvelopeData]:
    booking = await ledger.get_booking(user.user_id, booking_id)
    return ApiResponse(data=BookingEnvelopeData(booking=BookingResponse.from_booking(booking)))


@router.delete("/bookings/{booking_id}", response_model=ApiResponse[BookingEnvelopeData])
async def cancel_booking(
    booking_id: int,
    user: CurrentUser = Depends(get_current_user),
    ledger: BookingLedger = Depends(get_booking_ledger),
) -> ApiResponse[BookingEnvelopeData]:
    """Cancel a pending booking; its seats become selectable again."""
    booking = await ledger.cancel_booking(user.user_id, booking_id)
    return ApiResponse(
        message="Booking cancelled successfully",
        data=BookingEnvelopeData(booking=BookingResponse.from_booking(booking)),
    )


@router.post("/bookings/{booking_id}/payment", response_model=ApiResponse[PaymentData])
async def pay_booking(
    booking_id: int,
    request: PaymentRequest,
    user: CurrentUser = Depends(get_current_user),
    payments: PaymentSimulator = Depends(get_payment_simulator),
) -> ApiResponse[PaymentData]:
    """
    Process a mock payment.

    The declared amount must equal the booking total exactly.
    """
    outcome = await payments.pay(
        user.user_id,
        booking_id,
        request.amount,
        payment_method=request.payment_method,
        card_number=request.card_number,
        expiry_date=request.expiry_date,
    )
    return ApiResponse(
        message="Payment processed successfully",
        data=PaymentData(
            payment=PaymentResponse(
                payment_reference=outcome.payment_reference,
                amount=cents_to_amount(outcome.amount_cents),
                status=outcome.booking.payment_status,
                payment_method=outcome.payment_method,
                processed_at=outcome.processed_at,
            ),
            booking=BookingResponse.from_booking(outcome.booking),
        ),
    )


@router.get("/bookings/{booking_id}/payment", response_model=ApiResponse[PaymentData])
async def get_payment(
    booking_id: int,
    user: CurrentUser = Depends(get_current_user),
    payments: PaymentSimulator = Depends(get_payment_simulator),
) -> ApiResponse[PaymentData]:
    """Payment receipt, or ``payment: null`` while the booking is unpaid."""
    booking, paid = await payments.get_payment(user.user_id, booking_id)
    payment = None
    if paid:
        payment = PaymentResponse(
            payment_reference=booking.payment_reference,
            amount=cents_to_amount(booking.total_amount_cents),
            status=booking.payment_status,
            processed_at=booking.updated_at,
        )
    return ApiResponse(
        message=None if paid else "Payment is pending",
        data=PaymentData(payment=payment, booking=BookingResponse.from_booking(booking)),
    )
