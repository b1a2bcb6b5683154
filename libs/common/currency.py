"""Currency helpers for HarvestHub.

Reference unit: USD (Decimal, two decimal places). All prices, wallet
balances, shipping fees and order totals are held in this unit.

Shipping tiers are quoted in INR and converted once, at computation time,
by dividing by the INR exchange rate. Display conversion to other
currencies is cosmetic and never feeds back into arithmetic.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

REFERENCE_CURRENCY = "USD"
CENT = Decimal("0.01")

CURRENCIES: dict[str, dict[str, str]] = {
    "USD": {"name": "United States Dollar", "symbol": "$"},
    "EUR": {"name": "Euro", "symbol": "€"},
    "INR": {"name": "Indian Rupee", "symbol": "₹"},
    "GBP": {"name": "British Pound", "symbol": "£"},
}

EXCHANGE_RATES: dict[str, Decimal] = {
    "USD": Decimal("1"),
    "EUR": Decimal("0.93"),
    "INR": Decimal("83.50"),
    "GBP": Decimal("0.79"),
}


def quantize_money(amount: Decimal) -> Decimal:
    """Round to cents, half-up."""
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def inr_to_reference(amount_inr: Decimal, rate: Optional[Decimal] = None) -> Decimal:
    """Convert an INR amount into the reference unit, rounded to cents."""
    rate = rate if rate is not None else EXCHANGE_RATES["INR"]
    return quantize_money(Decimal(amount_inr) / rate)


def format_price(amount: Decimal, currency: str = REFERENCE_CURRENCY) -> str:
    """Render a reference-unit amount in a display currency, e.g. ``$4.99``.

    Unknown currencies fall back to USD.
    """
    if currency not in CURRENCIES:
        currency = REFERENCE_CURRENCY
    converted = quantize_money(Decimal(amount) * EXCHANGE_RATES[currency])
    return f"{CURRENCIES[currency]['symbol']}{converted}"
