"""Unit tests for the shipping fee calculator."""

from decimal import Decimal

import pytest
from services.market_service.models import CartLine
from services.market_service.services.shipping import compute_fee, fee_in_inr
from tests.factories import AccountFactory, AddressFactory, ProductFactory

SELLER = AccountFactory.create(
    id="seller",
    role="Farmer",
    farm_city="Mysuru",
    farm_district="Mysuru",
    farm_state="Karnataka",
)


def _cart(seller_id="seller"):
    return [CartLine(snapshot=ProductFactory.create(seller_id=seller_id), quantity=1)]


def _lookup(account_id):
    return SELLER if account_id == SELLER.id else None


@pytest.mark.unit
def test_empty_cart_ships_free():
    assert compute_fee([], AddressFactory.create(), _lookup) == Decimal("0")


@pytest.mark.unit
def test_unknown_seller_uses_fallback_fee():
    fee = compute_fee(_cart("ghost"), AddressFactory.create(), _lookup)

    assert fee == Decimal("0.60")


@pytest.mark.unit
@pytest.mark.parametrize(
    "address, expected_inr, expected_fee",
    [
        ({"city": "Mysuru", "district": "Mysuru", "state": "Karnataka"}, 30, "0.36"),
        ({"city": "Nanjangud", "district": "mysuru", "state": "Karnataka"}, 50, "0.60"),
        ({"city": "Bengaluru", "district": "Bengaluru Urban", "state": "Karnataka"}, 80, "0.96"),
        ({"city": "Chennai", "district": "Chennai", "state": "Tamil Nadu"}, 120, "1.44"),
    ],
)
def test_fee_tiers(address, expected_inr, expected_fee):
    buyer_address = AddressFactory.create(**address)

    assert fee_in_inr(buyer_address, SELLER) == Decimal(expected_inr)
    assert compute_fee(_cart(), buyer_address, _lookup) == Decimal(expected_fee)


@pytest.mark.unit
def test_city_match_ignores_case_and_whitespace():
    buyer_address = AddressFactory.create(city="  mysuru ", district="", state="")

    assert fee_in_inr(buyer_address, SELLER) == Decimal("30")


@pytest.mark.unit
def test_blank_fields_never_match():
    seller = AccountFactory.create(role="Farmer", farm_city="", farm_district=None, farm_state="")
    buyer_address = AddressFactory.create(city="", district="", state="")

    assert fee_in_inr(buyer_address, seller) == Decimal("120")


@pytest.mark.unit
def test_custom_exchange_rate():
    buyer_address = AddressFactory.create(city="Chennai", district="", state="")

    fee = compute_fee(_cart(), buyer_address, _lookup, inr_rate=Decimal("100"))

    assert fee == Decimal("1.20")
