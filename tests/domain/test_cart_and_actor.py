"""Unit tests for the Cart value object and role capabilities."""

import pytest

from storefront.domain.exceptions import PermissionDenied, ValidationError
from storefront.domain.model.actor import Actor, Capability, Role
from storefront.domain.model.cart import Cart


class TestCart:

    def test_merges_repeated_variants(self):
        cart = Cart.of([(1, 2), (2, 1), (1, 3)])
        assert len(cart) == 2
        assert {(l.variant_id, l.quantity.value) for l in cart.lines} == {(1, 5), (2, 1)}

    def test_rejects_non_positive_quantity(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Cart.of([(1, 0)])

    def test_empty(self):
        assert Cart().is_empty
        assert Cart.of([]).is_empty


class TestActor:

    @pytest.mark.parametrize("role", [Role.SALES, Role.ADMIN])
    def test_sales_and_admin_transition_payments(self, role):
        Actor(1, role).require(Capability.TRANSITION_PAYMENTS)

    @pytest.mark.parametrize("role", [Role.CUSTOMER, Role.MARKETING])
    def test_others_cannot_transition_payments(self, role):
        with pytest.raises(PermissionDenied, match="not allowed to transition payments"):
            Actor(1, role).require(Capability.TRANSITION_PAYMENTS)

    def test_marketing_manages_stock(self):
        assert Actor(1, Role.MARKETING).can(Capability.MANAGE_STOCK)
        assert not Actor(1, Role.SALES).can(Capability.MANAGE_STOCK)

    def test_parse_role(self):
        assert Role.parse("ADMIN") == Role.ADMIN
        with pytest.raises(ValidationError, match="Unknown role"):
            Role.parse("guest")
