"""Unit tests for domain value objects."""

from decimal import Decimal

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money, Quantity, TaxRate


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation(self):
        m = Money(Decimal("10.50"))
        assert m.amount == Decimal("10.50")
        assert m.currency == "EUR"

    def test_of_factory_from_string(self):
        assert Money.of("25.99").amount == Decimal("25.99")

    def test_of_factory_from_float_goes_through_str(self):
        assert Money.of(0.1).amount == Decimal("0.1")

    def test_of_factory_rejects_garbage(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("ten")

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_float_amount_rejected(self):
        with pytest.raises(ValidationError, match="must be a Decimal"):
            Money(10.0)  # type: ignore[arg-type]

    def test_addition_and_subtraction(self):
        assert Money.of("10") + Money.of("5.50") == Money.of("15.50")
        assert Money.of("10") - Money.of("3") == Money.of("7")

    def test_subtraction_going_negative_rejected(self):
        with pytest.raises(ValidationError, match="negative amount"):
            Money.of("5") - Money.of("10")

    def test_minus_floor_zero_clamps(self):
        assert Money.of("5").minus_floor_zero(Money.of("10")) == Money.zero()
        assert Money.of("10").minus_floor_zero(Money.of("4")) == Money.of("6")

    def test_multiplication_by_int(self):
        assert Money.of("7.50") * 3 == Money.of("22.50")

    def test_multiplication_by_decimal_rejected(self):
        with pytest.raises(TypeError):
            Money.of("7.50") * Decimal("1.5")  # type: ignore[operator]

    def test_rounding_is_half_up(self):
        assert Money.of("0.125").rounded().amount == Decimal("0.13")
        assert Money.of("0.135").rounded().amount == Decimal("0.14")
        assert Money.of("0.124").rounded().amount == Decimal("0.12")

    def test_percent(self):
        assert Money.of("100.00").percent(Decimal("10")) == Money.of("10.00")
        assert Money.of("45.00").percent(Decimal("10")) == Money.of("4.50")
        assert Money.of("0.05").percent(Decimal("50")) == Money.of("0.03")

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money(Decimal("10"), "EUR") + Money(Decimal("5"), "USD")

    def test_str_formatting(self):
        assert str(Money.of("15")) == "€15.00"
        assert str(Money.of("9.5")) == "€9.50"
        assert str(Money.of("9.5", "USD")) == "$9.50"

    def test_comparison_operators(self):
        assert Money.of("5") < Money.of("10")
        assert Money.of("10") > Money.of("5")
        assert Money.of("10") >= Money.of("10.00")
        assert Money.of("10") <= Money.of("10")


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_valid_quantity(self):
        assert Quantity(5).value == 5

    def test_zero_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(0)

    def test_negative_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(-3)

    def test_bool_rejected(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity(True)


# ── TaxRate ──────────────────────────────────────────────────────────────────


class TestTaxRate:

    def test_exclusive_part_of_inclusive_price(self):
        rate = TaxRate.of("0.21")
        assert rate.exclusive_part(Money.of("121.00")) == Money.of("100.00")
        assert rate.exclusive_part(Money.of("45.00")) == Money.of("37.19")

    def test_zero_rate_keeps_amount(self):
        assert TaxRate.of("0").exclusive_part(Money.of("10.00")) == Money.of("10.00")

    @pytest.mark.parametrize("value", ["-0.01", "1", "1.5"])
    def test_out_of_range_rejected(self, value):
        with pytest.raises(ValidationError, match="Tax rate"):
            TaxRate.of(value)

    def test_str(self):
        assert str(TaxRate.of("0.21")) == "21%"
