"""Seat pricing: subtotal, service fee, tax and total in minor units."""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from cinebook.config import settings

CENT = Decimal("1")


@dataclass(frozen=True)
class PriceBreakdown:
    """
    Result of pricing a seat selection.

    ``subtotal_cents`` and ``total_cents`` are exact integers. The fee and
    tax terms are kept unrounded so that rounding happens once, on the
    total, and never drifts by a cent across terms.
    """

    subtotal_cents: int
    service_fee_cents: Decimal
    tax_cents: Decimal
    total_cents: int


class PricingCalculator:
    """Pure pricing function over effective seat prices."""

    def __init__(
        self,
        service_fee_rate: Decimal | None = None,
        tax_rate: Decimal | None = None,
    ) -> None:
        self.service_fee_rate = (
            settings.service_fee_rate if service_fee_rate is None else service_fee_rate
        )
        self.tax_rate = settings.tax_rate if tax_rate is None else tax_rate

    def calculate(self, seat_prices_cents: Iterable[int]) -> PriceBreakdown:
        """
        Price a list of effective seat prices (override or showtime base).

        Args:
            seat_prices_cents: One effective price per seat, in cents

        Returns:
            PriceBreakdown with the total rounded half-up to the cent
        """
        subtotal = sum(seat_prices_cents)
        service_fee = Decimal(subtotal) * self.service_fee_rate
        tax = Decimal(subtotal) * self.tax_rate
        total = (Decimal(subtotal) + service_fee + tax).quantize(CENT, rounding=ROUND_HALF_UP)
        return PriceBreakdown(
            subtotal_cents=subtotal,
            service_fee_cents=service_fee,
            tax_cents=tax,
            total_cents=int(total),
        )


def cents_to_amount(cents: int | Decimal) -> float:
    """Format minor units as a currency amount for JSON responses."""
    amount = (Decimal(cents) / 100).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return float(amount)


def amount_to_cents(amount: float | int | Decimal) -> int | None:
    """
    Convert a client-declared amount to minor units.

    Returns None when the amount is not a whole number of cents, which can
    never equal a stored total.
    """
    cents = Decimal(str(amount)) * 100
    if not cents.is_finite() or cents != cents.to_integral_value():
        return None
    return int(cents)
