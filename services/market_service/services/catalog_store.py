"""Catalog store: the sellable products and their live stock levels."""

import asyncio
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import AsyncIterator, Callable, Iterable, Optional

from libs.common.logging import get_logger
from services.market_service.errors import PersistenceError, ProductNotFound
from services.market_service.models import PriceChange, Product, new_id
from services.market_service.services.persistence import Snapshotter, SnapshotStore
from services.market_service.services.seed import seed_products

logger = get_logger(__name__)


class CatalogStore:
    """Owns the product collection.

    Reads hand out copies, so the only way to change a product is through
    the mutation methods below. Stock changes and product edits for a given
    product are serialised through ``stock_lock``.
    """

    def __init__(self, store: Optional[SnapshotStore] = None):
        self._snapshots = Snapshotter(store, "products", Product)
        self._products: list[Product] = []
        self._locks: dict[str, asyncio.Lock] = {}

    async def load(self) -> None:
        self._products = await self._snapshots.load(seed_products)
        logger.info("Catalog loaded with %d products", len(self._products))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _find(self, product_id: str) -> Optional[Product]:
        return next((p for p in self._products if p.id == product_id), None)

    def get(self, product_id: str) -> Optional[Product]:
        product = self._find(product_id)
        return product.model_copy(deep=True) if product else None

    def require(self, product_id: str) -> Product:
        product = self.get(product_id)
        if product is None:
            raise ProductNotFound(product_id)
        return product

    def live_stock_of(self, product_id: str) -> int:
        """Authoritative stock count, as opposed to a cart line's snapshot."""
        product = self._find(product_id)
        if product is None:
            raise ProductNotFound(product_id)
        return product.stock

    def list_products(
        self,
        *,
        include_disabled: bool = False,
        category: Optional[str] = None,
        search: Optional[str] = None,
        seller_id: Optional[str] = None,
    ) -> list[Product]:
        products = self._products
        if not include_disabled:
            products = [p for p in products if p.enabled]
        if category:
            products = [p for p in products if p.category.lower() == category.lower()]
        if seller_id:
            products = [p for p in products if p.seller_id == seller_id]
        if search:
            needle = search.lower().strip()
            products = [
                p
                for p in products
                if needle in p.name.lower() or needle in p.description.lower()
            ]
        return [p.model_copy(deep=True) for p in products]

    # ------------------------------------------------------------------
    # Locking
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def stock_lock(self, product_ids: Iterable[str]) -> AsyncIterator[None]:
        """Hold the per-product locks for ``product_ids``.

        Locks are taken in sorted order so two callers locking overlapping
        sets cannot deadlock.
        """
        locks = [
            self._locks.setdefault(pid, asyncio.Lock())
            for pid in sorted(set(product_ids))
        ]
        acquired: list[asyncio.Lock] = []
        try:
            for lock in locks:
                await lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def add_product(self, data: dict) -> Product:
        """Insert a new product at the head of the catalog."""
        product = Product(**{**data, "id": new_id("p")})
        self._products.insert(0, product)
        await self._snapshots.save(self._products)
        logger.info("Added product %s (%s)", product.id, product.name)
        return product.model_copy(deep=True)

    def _replace(self, product: Product) -> None:
        for index, existing in enumerate(self._products):
            if existing.id == product.id:
                self._products[index] = product.model_copy(deep=True)
                return
        raise ProductNotFound(product.id)

    async def update_product(self, product: Product) -> Product:
        """Replace the stored product with ``product`` verbatim."""
        async with self.stock_lock([product.id]):
            self._replace(product)
            await self._snapshots.save(self._products)
        logger.info("Updated product %s", product.id)
        return product.model_copy(deep=True)

    async def edit_product(
        self, product_id: str, mutate: Callable[[Product], Product]
    ) -> Product:
        """Read, change and write back a product under its stock lock.

        ``mutate`` receives a copy of the current product, so a stock
        decrement that lands while an edit is waiting is never overwritten
        with a stale value.
        """
        async with self.stock_lock([product_id]):
            current = self._find(product_id)
            if current is None:
                raise ProductNotFound(product_id)
            product = mutate(current.model_copy(deep=True))
            self._replace(product)
            await self._snapshots.save(self._products)
        logger.info("Edited product %s", product_id)
        return product.model_copy(deep=True)

    async def delete_product(self, product_id: str) -> None:
        async with self.stock_lock([product_id]):
            product = self._find(product_id)
            if product is None:
                raise ProductNotFound(product_id)
            self._products.remove(product)
            await self._snapshots.save(self._products)
        logger.info("Deleted product %s", product_id)

    async def decrement_stock(self, product_id: str, quantity: int) -> Product:
        """Lower stock by ``quantity``, never below zero.

        Callers must already hold ``stock_lock`` for the product.
        """
        return (await self.decrement_many({product_id: quantity}))[0]

    async def decrement_many(self, quantities: dict[str, int]) -> list[Product]:
        """Decrement several products and persist once.

        Callers must already hold ``stock_lock`` for every product. If the
        save fails the in-memory stock is put back before re-raising.
        """
        targets = []
        for product_id, quantity in quantities.items():
            product = self._find(product_id)
            if product is None:
                raise ProductNotFound(product_id)
            targets.append((product, quantity))

        previous = [(product, product.stock) for product, _ in targets]
        for product, quantity in targets:
            product.stock = max(0, product.stock - quantity)
        try:
            await self._snapshots.save(self._products)
        except PersistenceError:
            for product, stock in previous:
                product.stock = stock
            raise
        return [product.model_copy(deep=True) for product, _ in targets]


def with_new_price(product: Product, price: Decimal, changed_by: str) -> Product:
    """Copy of ``product`` at ``price``; a real change is appended to its
    price history."""
    if price == product.price:
        return product.model_copy(deep=True)
    history = [*product.price_history, PriceChange(price=price, changed_by=changed_by)]
    return product.model_copy(update={"price": price, "price_history": history}, deep=True)
