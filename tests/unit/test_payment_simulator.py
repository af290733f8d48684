"""Tests for the mock payment gateway and the payment simulator."""

import logging
import re
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from conftest import InMemoryBookingStore

from cinebook.errors import BookingValidationError, NotFoundError
from cinebook.models.booking import (
    BOOKING_CANCELLED,
    BOOKING_CONFIRMED,
    PAYMENT_COMPLETED,
)
from cinebook.services.payments import (
    ChargeRequest,
    ChargeResult,
    MockPaymentGateway,
    PaymentSimulator,
    mask_card_number,
)


def make_simulator(store: InMemoryBookingStore) -> PaymentSimulator:
    return PaymentSimulator(store, MockPaymentGateway(delay_seconds=0))


# ---------------------------------------------------------------------------
# MockPaymentGateway
# ---------------------------------------------------------------------------


def test_mask_card_number_keeps_last_four() -> None:
    assert mask_card_number("4242424242424242") == "************4242"


async def test_gateway_returns_mock_reference() -> None:
    gateway = MockPaymentGateway(delay_seconds=0)
    result = await gateway.charge(
        ChargeRequest(booking_reference="BK-ABC123", amount_cents=4130, payment_method="card")
    )
    assert re.fullmatch(r"MOCK-PAY-[0-9A-F]{6}", result.payment_reference)
    assert result.processed_at.tzinfo is not None


async def test_gateway_never_logs_full_card_number(caplog: pytest.LogCaptureFixture) -> None:
    gateway = MockPaymentGateway(delay_seconds=0)
    with caplog.at_level(logging.INFO, logger="cinebook.services.payments"):
        await gateway.charge(
            ChargeRequest(
                booking_reference="BK-ABC123",
                amount_cents=4130,
                payment_method="credit_card",
                card_number="4242424242424242",
            )
        )
    assert "4242424242424242" not in caplog.text
    assert "4242" in caplog.text


# ---------------------------------------------------------------------------
# PaymentSimulator.pay
# ---------------------------------------------------------------------------


async def test_exact_amount_confirms_booking(booking_store: InMemoryBookingStore) -> None:
    booking = booking_store.add_booking(
        user_id=1, showtime_id=1, seat_ids=[1, 2, 4], total_amount_cents=4130
    )

    outcome = await make_simulator(booking_store).pay(1, booking.id, 41.30)

    assert outcome.booking.status == BOOKING_CONFIRMED
    assert outcome.booking.payment_status == PAYMENT_COMPLETED
    assert outcome.booking.payment_reference == outcome.payment_reference
    assert outcome.payment_reference.startswith("MOCK-PAY-")
    assert outcome.amount_cents == 4130


@pytest.mark.parametrize("amount", [41.29, 41.31, 41.305, 0])
async def test_mismatched_amount_is_rejected(
    booking_store: InMemoryBookingStore, amount: float
) -> None:
    booking = booking_store.add_booking(
        user_id=1, showtime_id=1, seat_ids=[1], total_amount_cents=4130
    )

    with pytest.raises(BookingValidationError, match="Amount mismatch") as exc_info:
        await make_simulator(booking_store).pay(1, booking.id, amount)

    assert exc_info.value.data == {"expectedAmount": 41.3, "receivedAmount": amount}
    assert booking.payment_status == "pending"


@pytest.mark.parametrize("amount", [None, True])
async def test_missing_amount_is_rejected(booking_store: InMemoryBookingStore, amount) -> None:
    booking = booking_store.add_booking(user_id=1, showtime_id=1, seat_ids=[1])

    with pytest.raises(BookingValidationError, match="Amount is required"):
        await make_simulator(booking_store).pay(1, booking.id, amount)


async def test_double_payment_is_rejected(booking_store: InMemoryBookingStore) -> None:
    booking = booking_store.add_booking(
        user_id=1, showtime_id=1, seat_ids=[1], total_amount_cents=2360
    )
    simulator = make_simulator(booking_store)
    first = await simulator.pay(1, booking.id, 23.60)

    with pytest.raises(BookingValidationError, match="already been paid") as exc_info:
        await simulator.pay(1, booking.id, 23.60)

    assert exc_info.value.data["booking"]["paymentReference"] == first.payment_reference
    assert booking.payment_reference == first.payment_reference


async def test_cancelled_booking_cannot_be_paid(booking_store: InMemoryBookingStore) -> None:
    booking = booking_store.add_booking(
        user_id=1, showtime_id=1, seat_ids=[1], status=BOOKING_CANCELLED
    )

    with pytest.raises(BookingValidationError, match="cancelled booking"):
        await make_simulator(booking_store).pay(1, booking.id, 23.60)


async def test_other_users_booking_looks_missing(booking_store: InMemoryBookingStore) -> None:
    booking = booking_store.add_booking(user_id=1, showtime_id=1, seat_ids=[1])

    with pytest.raises(NotFoundError, match="does not belong to you"):
        await make_simulator(booking_store).pay(2, booking.id, 23.60)


async def test_missing_booking(booking_store: InMemoryBookingStore) -> None:
    with pytest.raises(NotFoundError):
        await make_simulator(booking_store).pay(1, 404, 23.60)


async def test_gateway_is_not_called_when_validation_fails(
    booking_store: InMemoryBookingStore,
) -> None:
    booking = booking_store.add_booking(
        user_id=1, showtime_id=1, seat_ids=[1], total_amount_cents=2360
    )
    provider = AsyncMock()
    simulator = PaymentSimulator(booking_store, provider)

    with pytest.raises(BookingValidationError):
        await simulator.pay(1, booking.id, 10.00)

    provider.charge.assert_not_awaited()


async def test_booking_cancelled_during_charge(booking_store: InMemoryBookingStore) -> None:
    booking = booking_store.add_booking(
        user_id=1, showtime_id=1, seat_ids=[1], total_amount_cents=2360
    )

    async def charge_while_cancelled(request: ChargeRequest) -> ChargeResult:
        await booking_store.mark_cancelled(booking.id)
        return ChargeResult("MOCK-PAY-FFFFFF", datetime.now(timezone.utc))

    provider = AsyncMock()
    provider.charge = AsyncMock(side_effect=charge_while_cancelled)

    with pytest.raises(BookingValidationError, match="cancelled booking"):
        await PaymentSimulator(booking_store, provider).pay(1, booking.id, 23.60)

    assert booking.status == BOOKING_CANCELLED
    assert booking.payment_reference is None


# ---------------------------------------------------------------------------
# PaymentSimulator.get_payment
# ---------------------------------------------------------------------------


async def test_get_payment_reports_pending_then_paid(booking_store: InMemoryBookingStore) -> None:
    booking = booking_store.add_booking(
        user_id=1, showtime_id=1, seat_ids=[1], total_amount_cents=2360
    )
    simulator = make_simulator(booking_store)

    _, paid = await simulator.get_payment(1, booking.id)
    assert paid is False

    await simulator.pay(1, booking.id, 23.6)
    _, paid = await simulator.get_payment(1, booking.id)
    assert paid is True
