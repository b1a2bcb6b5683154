"""Cart engine: per-session working selection of products.

Every mutation re-reads live stock from the catalog and either applies
completely or leaves the cart untouched. Lines keep the product snapshot
taken when they were written, so the subtotal is the price the buyer was
shown even if the catalog price moves afterwards.
"""

from decimal import Decimal
from typing import Optional

from libs.common.logging import get_logger
from services.market_service.errors import (
    FieldValidationError,
    InsufficientStock,
    MixedSellerCart,
    OutOfStock,
    ProductNotFound,
)
from services.market_service.models import CartLine, Product
from services.market_service.services.catalog_store import CatalogStore
from services.market_service.services.notifications import Notifier

logger = get_logger(__name__)


class CartEngine:
    def __init__(self, catalog: CatalogStore, notifier: Notifier):
        self._catalog = catalog
        self._notifier = notifier
        self._carts: dict[str, list[CartLine]] = {}

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def lines(self, session_id: str) -> list[CartLine]:
        return list(self._carts.get(session_id, []))

    def count(self, session_id: str) -> int:
        return sum(line.quantity for line in self._carts.get(session_id, []))

    def subtotal(self, session_id: str) -> Decimal:
        return sum(
            (line.line_total for line in self._carts.get(session_id, [])),
            Decimal("0"),
        )

    def seller_id(self, session_id: str) -> Optional[str]:
        lines = self._carts.get(session_id)
        return lines[0].snapshot.seller_id if lines else None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _purchasable(self, product_id: str) -> Product:
        product = self._catalog.get(product_id)
        if product is None or not product.enabled:
            raise self._notifier.reject(ProductNotFound(product_id))
        return product

    def _check_quantity(self, quantity: int) -> None:
        if quantity < 1:
            raise self._notifier.reject(
                FieldValidationError("quantity", "validation.quantity")
            )

    def _only_available(self, product: Product) -> InsufficientStock:
        return self._notifier.reject(
            InsufficientStock(
                available=product.stock,
                product_id=product.id,
                product_name=product.name,
                unit=product.unit,
            )
        )

    def add_to_cart(self, session_id: str, product_id: str, quantity: int) -> list[CartLine]:
        """Add ``quantity`` of a product, merging with an existing line."""
        self._check_quantity(quantity)
        product = self._purchasable(product_id)
        if product.stock <= 0:
            raise self._notifier.reject(OutOfStock(product.id, product.name))

        lines = self._carts.get(session_id, [])
        index = next(
            (i for i, line in enumerate(lines) if line.product_id == product_id), None
        )
        in_cart = lines[index].quantity if index is not None else 0
        if in_cart + quantity > product.stock:
            raise self._only_available(product)

        cart_seller = lines[0].snapshot.seller_id if lines else None
        if cart_seller is not None and cart_seller != product.seller_id:
            raise self._notifier.reject(
                MixedSellerCart(product.id, product.name, cart_seller)
            )

        line = CartLine(snapshot=product, quantity=in_cart + quantity)
        updated = list(lines)
        if index is None:
            updated.append(line)
        else:
            updated[index] = line
        self._carts[session_id] = updated

        self._notifier.success("cart.added", product_name=product.name)
        return list(updated)

    def update_quantity(self, session_id: str, product_id: str, quantity: int) -> list[CartLine]:
        """Set a line's quantity exactly; zero or less removes the line."""
        if quantity <= 0:
            return self.remove_from_cart(session_id, product_id)

        product = self._catalog.get(product_id)
        if product is None:
            raise self._notifier.reject(ProductNotFound(product_id))
        if quantity > product.stock:
            raise self._only_available(product)

        lines = self._carts.get(session_id, [])
        self._carts[session_id] = [
            line.model_copy(update={"quantity": quantity})
            if line.product_id == product_id
            else line
            for line in lines
        ]
        return self.lines(session_id)

    def remove_from_cart(self, session_id: str, product_id: str) -> list[CartLine]:
        """Drop a line. Removing an absent product is a no-op."""
        lines = self._carts.get(session_id)
        if lines:
            self._carts[session_id] = [
                line for line in lines if line.product_id != product_id
            ]
        return self.lines(session_id)

    def buy_now(self, session_id: str, product_id: str, quantity: int) -> list[CartLine]:
        """Replace the whole cart with a single line for this product."""
        self._check_quantity(quantity)
        product = self._purchasable(product_id)
        if product.stock <= 0:
            raise self._notifier.reject(OutOfStock(product.id, product.name))
        if product.stock < quantity:
            raise self._only_available(product)

        self._carts[session_id] = [CartLine(snapshot=product, quantity=quantity)]
        logger.info("Buy-now replaced cart for session %s with %s", session_id, product_id)
        return self.lines(session_id)

    def clear_cart(self, session_id: str) -> None:
        self._carts.pop(session_id, None)

    def discard_lines(self, session_id: str, placed: list[CartLine]) -> None:
        """Remove exactly the ``placed`` lines after an order is taken.

        Lines are replaced rather than mutated, so a line added or changed
        while the order was being placed is not one of ``placed`` and stays.
        """
        placed_ids = {id(line) for line in placed}
        remaining = [
            line for line in self._carts.get(session_id, []) if id(line) not in placed_ids
        ]
        if remaining:
            self._carts[session_id] = remaining
        else:
            self._carts.pop(session_id, None)
