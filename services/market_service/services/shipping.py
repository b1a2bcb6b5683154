"""Shipping fee calculator.

Fees are tiered by how closely the buyer's address matches the seller's
farm location. Tiers are quoted in INR and converted to the reference
currency so they can be added to product prices directly.
"""

from decimal import Decimal
from typing import Callable, Optional, Sequence

from libs.common.currency import EXCHANGE_RATES, inr_to_reference
from services.market_service.models import Account, Address, CartLine

BASE_FEE_INR = Decimal("120")
CITY_FEE_INR = Decimal("30")
DISTRICT_FEE_INR = Decimal("50")
STATE_FEE_INR = Decimal("80")

# Applied as-is (already in the reference currency) when the seller is unknown.
FALLBACK_FEE = Decimal("0.60")

SellerLookup = Callable[[str], Optional[Account]]


def _norm(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def _matches(a: Optional[str], b: Optional[str]) -> bool:
    a, b = _norm(a), _norm(b)
    return bool(a) and bool(b) and a == b


def fee_in_inr(buyer_address: Address, seller: Account) -> Decimal:
    """Most specific matching tier wins: city, then district, then state."""
    if _matches(buyer_address.city, seller.farm_city):
        return CITY_FEE_INR
    if _matches(buyer_address.district, seller.farm_district):
        return DISTRICT_FEE_INR
    if _matches(buyer_address.state, seller.farm_state):
        return STATE_FEE_INR
    return BASE_FEE_INR


def compute_fee(
    cart: Sequence[CartLine],
    buyer_address: Address,
    seller_lookup: SellerLookup,
    *,
    inr_rate: Optional[Decimal] = None,
    fallback_fee: Decimal = FALLBACK_FEE,
) -> Decimal:
    """Shipping fee, in the reference currency, for shipping ``cart`` to
    ``buyer_address``. The seller is taken from the first cart line."""
    if not cart:
        return Decimal("0")

    seller = seller_lookup(cart[0].snapshot.seller_id)
    if seller is None:
        return fallback_fee

    rate = inr_rate if inr_rate is not None else EXCHANGE_RATES["INR"]
    return inr_to_reference(fee_in_inr(buyer_address, seller), rate)
