"""Unit tests for domain value objects."""

from decimal import Decimal

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money, Quantity, ShippingAddress


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation_defaults_to_store_currency(self):
        m = Money(Decimal("10.50"))
        assert m.amount == Decimal("10.50")
        assert m.currency == "ARS"

    def test_of_factory_from_string(self):
        assert Money.of("25.99").amount == Decimal("25.99")

    def test_of_factory_rejects_garbage(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("twelve")

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_addition_and_multiplication(self):
        assert Money.of("10") + Money.of("5.50") == Money.of("15.50")
        assert Money.of("7.50") * 3 == Money.of("22.50")

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money(Decimal("10"), "USD") + Money(Decimal("5"), "ARS")

    def test_zero(self):
        assert Money.zero().is_zero
        assert not Money.of("0.01").is_zero

    def test_str_formatting(self):
        assert str(Money.of("15")) == "$15.00"


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_valid_quantity(self):
        assert Quantity(5).value == 5

    def test_zero_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(0)

    def test_bool_rejected(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity(True)


# ── ShippingAddress ──────────────────────────────────────────────────────────


class TestShippingAddress:

    def test_blank_field_rejected(self):
        with pytest.raises(ValidationError, match="city is required"):
            ShippingAddress("Calle 1", "  ", "Córdoba", "5000")

    def test_postal_code_named_in_error(self):
        with pytest.raises(ValidationError, match="postal code is required"):
            ShippingAddress("Calle 1", "Córdoba", "Córdoba", "")

    def test_str(self):
        address = ShippingAddress("Calle 1", "Rosario", "Santa Fe", "2000")
        assert str(address) == "Calle 1, Rosario, Santa Fe (2000)"
