"""Cart router: cart operations and shipping quotes."""

from fastapi import APIRouter, Depends, status
from libs.common.currency import REFERENCE_CURRENCY
from services.market_service.dependencies import (
    CurrentSession,
    get_active_session,
    get_current_session,
    get_market,
)
from services.market_service.routers._helpers import cart_response
from services.market_service.schemas import (
    CartItemCreate,
    CartItemUpdate,
    CartResponse,
    ShippingQuoteRequest,
    ShippingQuoteResponse,
)
from services.market_service.services.market import MarketState

router = APIRouter(tags=["cart"])


# ============================================================================
# CART ENDPOINTS
# ============================================================================


@router.get("/cart", response_model=CartResponse)
async def get_cart(
    current: CurrentSession = Depends(get_current_session),
    market: MarketState = Depends(get_market),
):
    """Get current cart."""
    return cart_response(market, current.session_id)


@router.post("/cart/items", response_model=CartResponse)
async def add_to_cart(
    item_in: CartItemCreate,
    current: CurrentSession = Depends(get_active_session),
    market: MarketState = Depends(get_market),
):
    """Add item to cart, merging with an existing line."""
    market.carts.add_to_cart(current.session_id, item_in.product_id, item_in.quantity)
    return cart_response(market, current.session_id)


@router.patch("/cart/items/{product_id}", response_model=CartResponse)
async def update_cart_item(
    product_id: str,
    item_in: CartItemUpdate,
    current: CurrentSession = Depends(get_active_session),
    market: MarketState = Depends(get_market),
):
    """Set a line's quantity. Zero removes the line."""
    market.carts.update_quantity(current.session_id, product_id, item_in.quantity)
    return cart_response(market, current.session_id)


@router.delete("/cart/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(
    product_id: str,
    current: CurrentSession = Depends(get_active_session),
    market: MarketState = Depends(get_market),
):
    market.carts.remove_from_cart(current.session_id, product_id)
    return cart_response(market, current.session_id)


@router.post("/cart/buy-now", response_model=CartResponse)
async def buy_now(
    item_in: CartItemCreate,
    current: CurrentSession = Depends(get_active_session),
    market: MarketState = Depends(get_market),
):
    """Replace the cart with a single product, ready for checkout."""
    market.carts.buy_now(current.session_id, item_in.product_id, item_in.quantity)
    return cart_response(market, current.session_id)


@router.delete("/cart", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cart(
    current: CurrentSession = Depends(get_active_session),
    market: MarketState = Depends(get_market),
):
    market.carts.clear_cart(current.session_id)


@router.post("/cart/shipping-quote", response_model=ShippingQuoteResponse)
async def shipping_quote(
    quote_in: ShippingQuoteRequest,
    current: CurrentSession = Depends(get_current_session),
    market: MarketState = Depends(get_market),
):
    """Price the current cart delivered to an address."""
    subtotal = market.carts.subtotal(current.session_id)
    fee = market.placement.shipping_fee(current.session_id, quote_in.address)
    return ShippingQuoteResponse(
        subtotal=subtotal,
        shipping_fee=fee,
        total=subtotal + fee,
        currency=REFERENCE_CURRENCY,
    )
