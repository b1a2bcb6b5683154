"""Assistant router: recipe ideas and AI price suggestions."""

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from services.market_service.dependencies import (
    CurrentSession,
    get_current_session,
    get_market,
    require_farmer,
)
from services.market_service.errors import ProductNotFound
from services.market_service.schemas import (
    ApplyPriceRequest,
    PriceSuggestionResponse,
    ProductResponse,
)
from services.market_service.services.market import MarketState

router = APIRouter(tags=["assistant"])


@router.get("/recipes/{product_id}")
async def stream_recipe(
    product_id: str,
    current: CurrentSession = Depends(get_current_session),
    market: MarketState = Depends(get_market),
):
    """Stream a recipe for a product as plain text.

    Starting another recipe from the same session ends this stream.
    """
    product = market.catalog.get(product_id)
    if product is None or not product.enabled:
        raise ProductNotFound(product_id)
    return StreamingResponse(
        market.assistant.recipes.stream(current.session_id, product.name),
        media_type="text/plain; charset=utf-8",
    )


@router.post("/price-suggestions", response_model=list[PriceSuggestionResponse])
async def suggest_prices(
    current: CurrentSession = Depends(require_farmer),
    market: MarketState = Depends(get_market),
):
    """Suggest prices for the caller's listings."""
    products = market.catalog.list_products(
        include_disabled=True, seller_id=current.account.id
    )
    return await market.assistant.suggest_prices(products, actor=current.account)


@router.post("/price-suggestions/apply", response_model=ProductResponse)
async def apply_price_suggestion(
    apply_in: ApplyPriceRequest,
    current: CurrentSession = Depends(require_farmer),
    market: MarketState = Depends(get_market),
):
    return await market.assistant.apply_price_suggestion(
        current.account, apply_in.product_id, apply_in.price
    )
