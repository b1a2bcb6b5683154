"""Orders router: checkout and order history."""

from typing import Optional

from fastapi import APIRouter, Depends, status
from services.market_service.dependencies import (
    CurrentSession,
    get_current_session,
    get_market,
    get_optional_session,
)
from services.market_service.errors import OrderNotFound
from services.market_service.routers._helpers import order_response
from services.market_service.schemas import CheckoutRequest, OrderResponse
from services.market_service.services.market import MarketState

router = APIRouter(tags=["orders"])


# ============================================================================
# CHECKOUT
# ============================================================================


@router.post(
    "/checkout", response_model=OrderResponse, status_code=status.HTTP_201_CREATED
)
async def checkout(
    checkout_in: CheckoutRequest,
    current: Optional[CurrentSession] = Depends(get_optional_session),
    market: MarketState = Depends(get_market),
):
    """Place an order for the session's cart.

    Anonymous callers reach the placement protocol too; it reports them the
    same way as an empty cart.
    """
    order = await market.placement.place_order(
        current.session_id if current else "",
        checkout_in.shipping_address,
        checkout_in.payment_method,
    )
    return order_response(order)


# ============================================================================
# ORDER HISTORY
# ============================================================================


@router.get("/orders", response_model=list[OrderResponse])
async def list_my_orders(
    current: CurrentSession = Depends(get_current_session),
    market: MarketState = Depends(get_market),
):
    """Orders placed by the current buyer, newest first."""
    return [order_response(o) for o in market.orders.for_buyer(current.account.id)]


@router.get("/orders/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str,
    current: CurrentSession = Depends(get_current_session),
    market: MarketState = Depends(get_market),
):
    order = market.orders.get(order_id)
    account = current.account
    if account.id not in (order.buyer_id, order.seller_id) and not account.has_admin_access:
        raise OrderNotFound(order_id)
    return order_response(order)
