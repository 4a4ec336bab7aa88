"""Unit tests for the Variant aggregate."""

import pytest

from storefront.domain.exceptions import InsufficientStock, ValidationError
from storefront.domain.model.value_objects import Money
from storefront.domain.model.variant import Variant


def _variant(stock: int = 10, active: bool = True) -> Variant:
    return Variant(
        id=7,
        product_id=1,
        product_name="Camisa Lino",
        size="M",
        color="Blanco",
        unit_price=Money.of("100"),
        available_quantity=stock,
        active=active,
    )


class TestTake:

    def test_decrements_available(self):
        v = _variant(10)
        v.take(4)
        assert v.available_quantity == 6

    def test_can_take_everything(self):
        v = _variant(3)
        v.take(3)
        assert v.available_quantity == 0

    def test_insufficient_carries_details(self):
        v = _variant(2)
        with pytest.raises(InsufficientStock) as info:
            v.take(3)
        assert info.value.variant_id == 7
        assert info.value.available == 2
        assert info.value.requested == 3
        assert info.value.max_offer == 2
        assert v.available_quantity == 2

    def test_non_positive_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            _variant().take(0)


class TestPutBack:

    def test_increments_available(self):
        v = _variant(1)
        v.put_back(4)
        assert v.available_quantity == 5

    def test_non_positive_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            _variant().put_back(-1)


class TestAdjust:

    def test_negative_adjustment(self):
        v = _variant(5)
        v.adjust(-2)
        assert v.available_quantity == 3

    def test_cannot_go_negative(self):
        with pytest.raises(ValidationError, match="negative stock"):
            _variant(1).adjust(-2)

    def test_inactive_rejected(self):
        with pytest.raises(ValidationError, match="inactive"):
            _variant(active=False).adjust(1)

    def test_zero_rejected(self):
        with pytest.raises(ValidationError, match="cannot be zero"):
            _variant().adjust(0)


class TestDeactivate:

    def test_deactivates_once(self):
        v = _variant()
        v.deactivate()
        assert v.active is False
        with pytest.raises(ValidationError, match="already inactive"):
            v.deactivate()

    def test_label(self):
        assert _variant().label == "Camisa Lino (M/Blanco)"
