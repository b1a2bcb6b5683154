"""Wiring of the market stores into one application state object."""

from typing import Optional

from libs.common.config import get_settings
from libs.common.logging import get_logger
from services.market_service.services.account_store import AccountStore
from services.market_service.services.assistant import Assistant
from services.market_service.services.audit_trail import AuditTrail
from services.market_service.services.cart_engine import CartEngine
from services.market_service.services.catalog_store import CatalogStore
from services.market_service.services.notifications import (
    NotificationCenter,
    NotificationSink,
    Notifier,
)
from services.market_service.services.order_book import OrderBook
from services.market_service.services.order_placement import OrderPlacement
from services.market_service.services.persistence import SnapshotStore

logger = get_logger(__name__)


class MarketState:
    """Every store, sharing one snapshot store and one notification sink.

    Built once per application and handed to request handlers through a
    FastAPI dependency.
    """

    def __init__(
        self,
        store: Optional[SnapshotStore] = None,
        sink: Optional[NotificationSink] = None,
    ):
        settings = get_settings()
        self.notifications = sink or NotificationCenter(
            ttl_seconds=settings.NOTIFICATION_TTL_SECONDS,
            buffer_size=settings.NOTIFICATION_BUFFER_SIZE,
        )
        notifier = Notifier(self.notifications)

        self.audit = AuditTrail(store)
        self.catalog = CatalogStore(store)
        self.carts = CartEngine(self.catalog, notifier)
        self.accounts = AccountStore(self.audit, self.carts, notifier, store)
        self.orders = OrderBook(store)
        self.placement = OrderPlacement(
            self.catalog,
            self.carts,
            self.accounts,
            self.orders,
            self.audit,
            notifier,
            inr_rate=settings.INR_EXCHANGE_RATE,
            fallback_fee=settings.SHIPPING_FALLBACK_FEE,
        )
        self.assistant = Assistant(self.catalog, self.audit, notifier)
        self.notifier = notifier

    async def load(self) -> None:
        """Load every collection from the snapshot store (or seed data)."""
        await self.catalog.load()
        await self.accounts.load()
        await self.orders.load()
        await self.audit.load()
        logger.info("Market state loaded")

    @classmethod
    async def open(
        cls,
        store: Optional[SnapshotStore] = None,
        sink: Optional[NotificationSink] = None,
    ) -> "MarketState":
        state = cls(store, sink)
        await state.load()
        return state
