"""FastAPI application for the Market Service."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from libs.common.config import get_settings
from libs.common.error_handler import add_exception_handlers
from libs.common.logging import get_logger
from libs.common.middleware import add_observability_middleware
from libs.common.rate_limit import limiter, rate_limit_exceeded_handler
from libs.db.base import Base
from libs.db.config import build_engine, build_session_factory
from services.market_service.errors import MarketError
from services.market_service.routers import (
    accounts_router,
    admin_router,
    assistant_router,
    cart_router,
    catalog_router,
    farmer_router,
    orders_router,
)
from services.market_service.services.market import MarketState
from services.market_service.services.persistence import SqlSnapshotStore
from slowapi.errors import RateLimitExceeded

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the snapshot database and load the market, unless one was injected."""
    engine = None
    if getattr(app.state, "market", None) is None:
        settings = get_settings()
        engine = build_engine()
        if settings.AUTO_CREATE_TABLES:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        store = SqlSnapshotStore(build_session_factory(engine))
        app.state.market = await MarketState.open(store)
    try:
        yield
    finally:
        if engine is not None:
            await engine.dispose()
            logger.info("Database engine disposed")


async def market_error_handler(request: Request, exc: MarketError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app(market: Optional[MarketState] = None) -> FastAPI:
    """Create and configure the Market Service FastAPI app.

    Pass ``market`` to serve an already loaded state (tests do this).
    """
    app = FastAPI(
        title="HarvestHub Market Service",
        version="0.1.0",
        description="Farm-to-table marketplace - catalog, cart, checkout, orders, accounts.",
        lifespan=lifespan,
    )
    if market is not None:
        app.state.market = market

    # Add rate limiter state to app
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    add_observability_middleware(app)
    add_exception_handlers(app)
    app.add_exception_handler(MarketError, market_error_handler)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "market"}

    # Public catalog and storefront
    app.include_router(catalog_router, prefix="/store")
    app.include_router(cart_router, prefix="/store")
    app.include_router(orders_router, prefix="/store")
    app.include_router(assistant_router, prefix="/assistant")

    # Accounts and dashboards
    app.include_router(accounts_router)
    app.include_router(farmer_router, prefix="/farmer")
    app.include_router(admin_router, prefix="/admin")

    return app


app = create_app()
