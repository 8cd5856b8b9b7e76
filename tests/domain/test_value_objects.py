"""Unit tests for domain value objects."""

from decimal import Decimal

import pytest

from ims.domain.exceptions import InvalidQuantityError, ValidationError
from ims.domain.model.value_objects import Money, Quantity


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation_defaults_to_rupees(self):
        m = Money(Decimal("10.50"))
        assert m.amount == Decimal("10.50")
        assert m.currency == "INR"

    def test_of_factory_from_string(self):
        assert Money.of("25.99").amount == Decimal("25.99")

    def test_of_factory_from_int(self):
        assert Money.of(10).amount == Decimal("10")

    def test_zero_is_allowed(self):
        assert Money.of("0") == Money.zero()

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_garbage_rejected(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("ten")

    def test_bool_rejected(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of(True)

    def test_addition(self):
        assert Money.of("10") + Money.of("5.50") == Money.of("15.50")

    def test_multiplication_by_int(self):
        assert Money.of("7.50") * 3 == Money.of("22.50")

    def test_multiplication_by_float_rejected(self):
        with pytest.raises(TypeError):
            Money.of("7.50") * 1.5

    def test_percent_rounds_half_up(self):
        assert Money.of("850").percent(Decimal("0.18")) == Money.of("153.00")
        assert Money.of("0.25").percent(Decimal("0.1")) == Money.of("0.03")

    def test_divide(self):
        assert Money.of("10").divide(3) == Money.of("3.33")

    def test_divide_by_zero_rejected(self):
        with pytest.raises(ValidationError):
            Money.of("10").divide(0)

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money(Decimal("10"), "INR") + Money(Decimal("5"), "USD")

    def test_str_formatting(self):
        assert str(Money.of("15")) == "₹15.00"
        assert str(Money.of("1250.5")) == "₹1,250.50"
        assert str(Money.of("9.5", "USD")) == "$9.50"

    def test_comparison_operators(self):
        assert Money.of("5") < Money.of("10")
        assert Money.of("10") > Money.of("5")
        assert Money.of("10") >= Money.of("10")
        assert Money.of("10") <= Money.of("10")


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_valid_quantity(self):
        assert Quantity(5).value == 5

    def test_zero_rejected(self):
        with pytest.raises(InvalidQuantityError, match="must be positive"):
            Quantity(0)

    def test_negative_rejected(self):
        with pytest.raises(InvalidQuantityError, match="must be positive"):
            Quantity(-3)

    def test_non_integer_rejected(self):
        with pytest.raises(InvalidQuantityError, match="must be an integer"):
            Quantity(2.5)  # type: ignore[arg-type]

    def test_bool_rejected(self):
        with pytest.raises(InvalidQuantityError):
            Quantity(True)

    def test_is_a_validation_error(self):
        with pytest.raises(ValidationError):
            Quantity(0)

    def test_str(self):
        assert str(Quantity(7)) == "7"
