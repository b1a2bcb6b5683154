"""Market service routers package."""

from services.market_service.routers.accounts import router as accounts_router
from services.market_service.routers.admin import router as admin_router
from services.market_service.routers.assistant import router as assistant_router
from services.market_service.routers.cart import router as cart_router
from services.market_service.routers.catalog import router as catalog_router
from services.market_service.routers.farmer import router as farmer_router
from services.market_service.routers.orders import router as orders_router

__all__ = [
    "accounts_router",
    "admin_router",
    "assistant_router",
    "cart_router",
    "catalog_router",
    "farmer_router",
    "orders_router",
]
