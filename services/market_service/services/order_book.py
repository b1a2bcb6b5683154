"""Order book: placed orders and their status lifecycle."""

from typing import Optional

from libs.common.logging import get_logger
from services.market_service.errors import (
    InvalidStatusTransition,
    OrderNotFound,
    PersistenceError,
)
from services.market_service.models import Order, OrderStatus
from services.market_service.services.persistence import Snapshotter, SnapshotStore
from services.market_service.services.seed import seed_orders

logger = get_logger(__name__)


class OrderBook:
    def __init__(self, store: Optional[SnapshotStore] = None):
        self._snapshots = Snapshotter(store, "orders", Order)
        self._orders: list[Order] = []

    async def load(self) -> None:
        self._orders = await self._snapshots.load(seed_orders)
        logger.info("Order book loaded with %d orders", len(self._orders))

    async def add(self, order: Order) -> Order:
        """Insert at the head so the newest order comes first.

        The insert is undone if it cannot be saved.
        """
        stored = order.model_copy(deep=True)
        self._orders.insert(0, stored)
        try:
            await self._snapshots.save(self._orders)
        except PersistenceError:
            self._orders.remove(stored)
            raise
        return order

    async def discard(self, order_id: str) -> None:
        """Drop an order whose placement was rolled back."""
        order = next((o for o in self._orders if o.id == order_id), None)
        if order is None:
            return
        self._orders.remove(order)
        await self._snapshots.save(self._orders)
        logger.warning("Discarded order %s", order_id)

    def get(self, order_id: str) -> Order:
        order = next((o for o in self._orders if o.id == order_id), None)
        if order is None:
            raise OrderNotFound(order_id)
        return order.model_copy(deep=True)

    def all(self) -> list[Order]:
        return [o.model_copy(deep=True) for o in self._orders]

    def for_buyer(self, buyer_id: str) -> list[Order]:
        return [o.model_copy(deep=True) for o in self._orders if o.buyer_id == buyer_id]

    def for_seller(self, seller_id: str) -> list[Order]:
        return [o.model_copy(deep=True) for o in self._orders if o.seller_id == seller_id]

    async def advance_status(self, order_id: str, status: OrderStatus) -> Order:
        """Move an order forward. Status never regresses; setting the current
        status again is rejected too."""
        order = next((o for o in self._orders if o.id == order_id), None)
        if order is None:
            raise OrderNotFound(order_id)
        if status.rank <= order.status.rank:
            raise InvalidStatusTransition(order.status.value, status.value)

        previous = order.status
        order.status = status
        await self._snapshots.save(self._orders)
        logger.info("Order %s moved %s -> %s", order_id, previous.value, status.value)
        return order.model_copy(deep=True)
