"""Order placement: turns a session's cart into a committed order.

Placement either completes fully (wallet debited, order recorded, stock
decremented, cart cleared) or fails before anything is mutated. Stock is
validated and decremented while holding the catalog's per-product locks,
so two buyers racing for the last unit cannot both succeed.
"""

import re
from decimal import Decimal
from typing import Optional

from libs.common.logging import get_logger
from services.market_service.errors import (
    EmptyCartOrNoSession,
    FieldValidationError,
    InsufficientStock,
    MarketError,
    MixedSellerCart,
    PersistenceError,
)
from services.market_service.models import (
    Address,
    AuditAction,
    Order,
    OrderStatus,
    PaymentMethod,
    new_id,
)
from services.market_service.services.account_store import AccountStore
from services.market_service.services.audit_trail import AuditTrail
from services.market_service.services.cart_engine import CartEngine
from services.market_service.services.catalog_store import CatalogStore
from services.market_service.services.notifications import Notifier
from services.market_service.services.order_book import OrderBook
from services.market_service.services.shipping import FALLBACK_FEE, compute_fee

logger = get_logger(__name__)

PHONE_RE = re.compile(r"^\d{10}$")
PINCODE_RE = re.compile(r"^\d{6}$")

REQUIRED_ADDRESS_FIELDS = ("full_name", "phone", "street", "city", "state", "pincode")


def validate_address(address: Address) -> None:
    for field in REQUIRED_ADDRESS_FIELDS:
        if not getattr(address, field).strip():
            raise FieldValidationError(field, "validation.required")
    if not PHONE_RE.match(address.phone.strip()):
        raise FieldValidationError("phone", "validation.phone")
    if not PINCODE_RE.match(address.pincode.strip()):
        raise FieldValidationError("pincode", "validation.pincode")


def parse_payment_method(value) -> PaymentMethod:
    try:
        return PaymentMethod(value)
    except ValueError:
        raise FieldValidationError("payment_method", "validation.paymentMethod") from None


class OrderPlacement:
    def __init__(
        self,
        catalog: CatalogStore,
        carts: CartEngine,
        accounts: AccountStore,
        orders: OrderBook,
        audit: AuditTrail,
        notifier: Notifier,
        *,
        inr_rate: Optional[Decimal] = None,
        fallback_fee: Decimal = FALLBACK_FEE,
    ):
        self._catalog = catalog
        self._carts = carts
        self._accounts = accounts
        self._orders = orders
        self._audit = audit
        self._notifier = notifier
        self._inr_rate = inr_rate
        self._fallback_fee = fallback_fee

    def shipping_fee(self, session_id: str, address: Address) -> Decimal:
        """Quote for the session's current cart delivered to ``address``."""
        return compute_fee(
            self._carts.lines(session_id),
            address,
            self._accounts.get,
            inr_rate=self._inr_rate,
            fallback_fee=self._fallback_fee,
        )

    async def place_order(
        self,
        session_id: str,
        shipping_address: Address,
        payment_method: PaymentMethod | str,
    ) -> Order:
        buyer = self._accounts.resolve_session(session_id)
        lines = self._carts.lines(session_id)
        if buyer is None or not buyer.active or not lines:
            raise self._notifier.reject(EmptyCartOrNoSession())

        try:
            validate_address(shipping_address)
            method = parse_payment_method(payment_method)
        except FieldValidationError as e:
            raise self._notifier.reject(e) from None

        seller_id = lines[0].snapshot.seller_id
        for line in lines[1:]:
            if line.snapshot.seller_id != seller_id:
                raise self._notifier.reject(
                    MixedSellerCart(line.product_id, line.snapshot.name, seller_id)
                )

        async with self._catalog.stock_lock(line.product_id for line in lines):
            for line in lines:
                product = self._catalog.get(line.product_id)
                available = product.stock if product else 0
                if available < line.quantity:
                    raise self._notifier.reject(
                        InsufficientStock(
                            available=available,
                            product_id=line.product_id,
                            product_name=line.snapshot.name,
                            unit=line.snapshot.unit,
                            at_placement=True,
                        )
                    )

            # Price the lines that were stock-checked, not the live cart.
            subtotal = sum((line.line_total for line in lines), Decimal("0"))
            shipping_fee = compute_fee(
                lines,
                shipping_address,
                self._accounts.get,
                inr_rate=self._inr_rate,
                fallback_fee=self._fallback_fee,
            )
            total = subtotal + shipping_fee

            if method == PaymentMethod.WALLET:
                await self._accounts.debit_wallet(buyer.id, total)

            order = Order(
                id=new_id("ord"),
                buyer_id=buyer.id,
                seller_id=seller_id,
                items=lines,
                subtotal=subtotal,
                shipping_fee=shipping_fee,
                total=total,
                status=OrderStatus.CONFIRMED,
                shipping_address=shipping_address.model_copy(),
                payment_method=method,
            )
            quantities: dict[str, int] = {}
            for line in lines:
                quantities[line.product_id] = quantities.get(line.product_id, 0) + line.quantity
            try:
                await self._orders.add(order)
                await self._catalog.decrement_many(quantities)
            except MarketError:
                await self._roll_back(order)
                raise

        self._carts.discard_lines(session_id, lines)
        await self._audit.record(
            buyer,
            AuditAction.ORDER_PLACED,
            f"Order {order.id} placed for {total} via {method.value}.",
        )
        self._notifier.success("order.placed")
        logger.info(
            "Order %s placed by %s: %d lines, total %s",
            order.id,
            buyer.id,
            len(lines),
            total,
        )
        return order

    async def _roll_back(self, order: Order) -> None:
        """Undo the steps of a failed placement that did commit.

        Each store reverts its own step when that step's save fails, so
        only earlier, completed steps are undone here.
        """
        try:
            await self._orders.discard(order.id)
        except PersistenceError:
            logger.exception("Could not persist removal of order %s", order.id)
        if order.payment_method == PaymentMethod.WALLET:
            try:
                await self._accounts.refund_wallet(order.buyer_id, order.total)
            except PersistenceError:
                logger.exception("Could not persist refund for order %s", order.id)
