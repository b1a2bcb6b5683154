"""Response builders shared by the market routers."""

from services.market_service.models import CartLine, Order
from services.market_service.schemas import (
    CartLineResponse,
    CartResponse,
    OrderLineResponse,
    OrderResponse,
    ProductResponse,
)
from services.market_service.services.market import MarketState


def cart_response(market: MarketState, session_id: str) -> CartResponse:
    return CartResponse(
        items=[
            CartLineResponse(
                product=ProductResponse.model_validate(line.snapshot),
                quantity=line.quantity,
                line_total=line.line_total,
            )
            for line in market.carts.lines(session_id)
        ],
        count=market.carts.count(session_id),
        subtotal=market.carts.subtotal(session_id),
        seller_id=market.carts.seller_id(session_id),
    )


def _order_line(line: CartLine) -> OrderLineResponse:
    return OrderLineResponse(
        product_id=line.product_id,
        name=line.snapshot.name,
        unit=line.snapshot.unit,
        price=line.snapshot.price,
        quantity=line.quantity,
        line_total=line.line_total,
    )


def order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        id=order.id,
        buyer_id=order.buyer_id,
        seller_id=order.seller_id,
        items=[_order_line(line) for line in order.items],
        subtotal=order.subtotal,
        shipping_fee=order.shipping_fee,
        total=order.total,
        status=order.status,
        shipping_address=order.shipping_address,
        payment_method=order.payment_method,
        created_at=order.created_at,
    )
