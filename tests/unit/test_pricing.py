"""Tests for seat pricing and amount conversion."""

from decimal import Decimal

from cinebook.services.pricing import PricingCalculator, amount_to_cents, cents_to_amount


# ---------------------------------------------------------------------------
# PricingCalculator
# ---------------------------------------------------------------------------


def test_two_regular_one_premium_totals_41_30() -> None:
    breakdown = PricingCalculator().calculate([1000, 1000, 1500])

    assert breakdown.subtotal_cents == 3500
    assert breakdown.service_fee_cents == Decimal("350")
    assert breakdown.tax_cents == Decimal("280")
    assert breakdown.total_cents == 4130


def test_total_is_rounded_once_half_up() -> None:
    # 1.18 * 1234 = 1456.12; 1.18 * 1225 = 1445.5 rounds up
    assert PricingCalculator().calculate([1234]).total_cents == 1456
    assert PricingCalculator().calculate([1225]).total_cents == 1446


def test_fee_and_tax_are_not_rounded_per_term() -> None:
    breakdown = PricingCalculator().calculate([999])

    assert breakdown.service_fee_cents == Decimal("99.90")
    assert breakdown.tax_cents == Decimal("79.92")
    # 999 + 99.90 + 79.92 = 1178.82
    assert breakdown.total_cents == 1179


def test_custom_rates() -> None:
    calculator = PricingCalculator(service_fee_rate=Decimal("0"), tax_rate=Decimal("0.2"))
    assert calculator.calculate([1000, 500]).total_cents == 1800


def test_empty_selection_prices_to_zero() -> None:
    breakdown = PricingCalculator().calculate([])
    assert breakdown.subtotal_cents == 0
    assert breakdown.total_cents == 0


# ---------------------------------------------------------------------------
# Conversions
# ---------------------------------------------------------------------------


def test_cents_to_amount() -> None:
    assert cents_to_amount(4130) == 41.3
    assert cents_to_amount(Decimal("350")) == 3.5
    assert cents_to_amount(Decimal("79.92")) == 0.8


def test_amount_to_cents_accepts_exact_amounts() -> None:
    assert amount_to_cents(41.3) == 4130
    assert amount_to_cents(41.30) == 4130
    assert amount_to_cents(12) == 1200
    assert amount_to_cents(Decimal("0.07")) == 7


def test_amount_to_cents_rejects_fractional_cents() -> None:
    assert amount_to_cents(41.305) is None


def test_amount_to_cents_rejects_non_finite() -> None:
    assert amount_to_cents(float("inf")) is None
    assert amount_to_cents(float("nan")) is None
