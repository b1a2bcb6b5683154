"""Public catalog router: products, categories and farmers."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from services.market_service.dependencies import get_market
from services.market_service.errors import AccountNotFound, ProductNotFound
from services.market_service.models import UserRole
from services.market_service.schemas import (
    CategoryResponse,
    FarmerResponse,
    ProductResponse,
)
from services.market_service.services.market import MarketState
from services.market_service.services.seed import CATEGORIES

router = APIRouter(tags=["catalog"])


# ============================================================================
# PRODUCTS
# ============================================================================


@router.get("/products", response_model=list[ProductResponse])
async def list_products(
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None, max_length=100),
    seller_id: Optional[str] = Query(None),
    market: MarketState = Depends(get_market),
):
    """List enabled products, optionally filtered."""
    return market.catalog.list_products(
        category=category, search=search, seller_id=seller_id
    )


@router.get("/products/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str, market: MarketState = Depends(get_market)):
    """Get a single enabled product."""
    product = market.catalog.get(product_id)
    if product is None or not product.enabled:
        raise ProductNotFound(product_id)
    return product


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories():
    return CATEGORIES


# ============================================================================
# FARMERS
# ============================================================================


@router.get("/farmers", response_model=list[FarmerResponse])
async def list_farmers(market: MarketState = Depends(get_market)):
    """List active farmers."""
    return [f for f in market.accounts.farmers() if f.active]


@router.get("/farmers/{farmer_id}", response_model=FarmerResponse)
async def get_farmer(farmer_id: str, market: MarketState = Depends(get_market)):
    farmer = market.accounts.get(farmer_id)
    if farmer is None or farmer.role != UserRole.FARMER or not farmer.active:
        raise AccountNotFound(account_id=farmer_id)
    return farmer


@router.get("/farmers/{farmer_id}/products", response_model=list[ProductResponse])
async def list_farmer_products(
    farmer_id: str, market: MarketState = Depends(get_market)
):
    """A farmer's storefront: their enabled products."""
    return market.catalog.list_products(seller_id=farmer_id)
