"""Payment provider interface, mock gateway and the Payment Simulator."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

from cinebook.config import settings
from cinebook.errors import BookingValidationError, ForbiddenError, NotFoundError
from cinebook.models import Booking
from cinebook.models.booking import BOOKING_CANCELLED, BOOKING_CONFIRMED, PAYMENT_PENDING
from cinebook.repositories.bookings import BookingStore
from cinebook.services.pricing import amount_to_cents, cents_to_amount
from cinebook.services.references import ReferenceGenerator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChargeRequest:
    booking_reference: str
    amount_cents: int
    payment_method: str
    card_number: str | None = None
    expiry_date: str | None = None


@dataclass(frozen=True)
class ChargeResult:
    payment_reference: str
    processed_at: datetime


class PaymentProvider(Protocol):
    """Asynchronous payment capability; swap in a real gateway behind this."""

    async def charge(self, request: ChargeRequest) -> ChargeResult: ...


def mask_card_number(card_number: str) -> str:
    """Keep only the last four digits."""
    return card_number[-4:].rjust(16, "*")


class MockPaymentGateway:
    """Gateway that always approves after a fixed simulated round-trip."""

    def __init__(
        self,
        delay_seconds: float | None = None,
        references: ReferenceGenerator | None = None,
    ) -> None:
        self.delay_seconds = (
            settings.payment_delay_seconds if delay_seconds is None else delay_seconds
        )
        self.references = references or ReferenceGenerator()

    async def charge(self, request: ChargeRequest) -> ChargeResult:
        card = mask_card_number(request.card_number) if request.card_number else "n/a"
        logger.info(
            f"Mock payment for {request.booking_reference}: "
            f"{cents_to_amount(request.amount_cents)} via {request.payment_method} (card {card})"
        )
        await asyncio.sleep(self.delay_seconds)
        return ChargeResult(
            payment_reference=self.references.payment_reference(),
            processed_at=datetime.now(timezone.utc),
        )


@dataclass
class PaymentOutcome:
    booking: Booking
    payment_reference: str
    payment_method: str
    amount_cents: int
    processed_at: datetime


class PaymentSimulator:
    """
    Takes a pending booking to confirmed once the declared amount matches.

    This is the only writer of the pending -> confirmed transition. It never
    touches booking seats.
    """

    def __init__(self, bookings: BookingStore, provider: PaymentProvider | None = None) -> None:
        self.bookings = bookings
        self.provider = provider or MockPaymentGateway()

    async def _owned_booking(self, user_id: int, booking_id: int) -> Booking:
        booking = await self.bookings.get_booking(booking_id)
        if booking is None:
            raise NotFoundError("Booking not found or does not belong to you")
        if booking.user_id != user_id:
            raise ForbiddenError("Booking not found or does not belong to you")
        return booking

    @staticmethod
    def _ensure_payable(booking: Booking) -> None:
        if booking.status == BOOKING_CONFIRMED:
            raise BookingValidationError(
                "This booking has already been paid for",
                data={
                    "booking": {
                        "id": booking.id,
                        "bookingReference": booking.booking_reference,
                        "paymentStatus": booking.payment_status,
                        "paymentReference": booking.payment_reference,
                    }
                },
            )
        if booking.status == BOOKING_CANCELLED:
            raise BookingValidationError("Cannot pay for a cancelled booking")

    async def pay(
        self,
        user_id: int,
        booking_id: int,
        amount: float | None,
        payment_method: str = "credit_card",
        card_number: str | None = None,
        expiry_date: str | None = None,
    ) -> PaymentOutcome:
        """
        Charge the booking total and confirm the booking.

        Raises:
            BookingValidationError: amount missing or mismatched, already paid, cancelled
            NotFoundError: booking missing or owned by someone else
        """
        if amount is None:
            raise BookingValidationError("Amount is required and must be a number")

        booking = await self._owned_booking(user_id, booking_id)
        self._ensure_payable(booking)

        if amount_to_cents(amount) != booking.total_amount_cents:
            expected = cents_to_amount(booking.total_amount_cents)
            raise BookingValidationError(
                f"Amount mismatch. Expected {expected}, received {amount}",
                data={"expectedAmount": expected, "receivedAmount": amount},
            )

        charge = await self.provider.charge(
            ChargeRequest(
                booking_reference=booking.booking_reference,
                amount_cents=booking.total_amount_cents,
                payment_method=payment_method,
                card_number=card_number,
                expiry_date=expiry_date,
            )
        )

        if not await self.bookings.mark_paid(booking.id, charge.payment_reference):
            # Paid, cancelled or expired while the charge was in flight.
            logger.warning(
                f"Booking {booking.booking_reference} changed state during payment "
                f"{charge.payment_reference}"
            )
            current = await self._owned_booking(user_id, booking_id)
            self._ensure_payable(current)
            raise BookingValidationError("Booking can no longer be paid")

        logger.info(
            f"Payment {charge.payment_reference} confirmed booking {booking.booking_reference}"
        )
        confirmed = await self._owned_booking(user_id, booking_id)
        return PaymentOutcome(
            booking=confirmed,
            payment_reference=charge.payment_reference,
            payment_method=payment_method,
            amount_cents=booking.total_amount_cents,
            processed_at=charge.processed_at,
        )

    async def get_payment(self, user_id: int, booking_id: int) -> tuple[Booking, bool]:
        """Owned booking and whether its payment has completed."""
        booking = await self._owned_booking(user_id, booking_id)
        return booking, booking.payment_status != PAYMENT_PENDING
