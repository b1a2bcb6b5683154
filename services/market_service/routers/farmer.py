"""Farmer dashboard router: own listings and incoming orders."""

from fastapi import APIRouter, Depends, status
from services.market_service.dependencies import (
    CurrentSession,
    get_market,
    require_farmer,
)
from services.market_service.errors import (
    AccountNotFound,
    OrderNotFound,
    PermissionDenied,
)
from services.market_service.models import Account, AuditAction, Product, UserRole
from services.market_service.routers._helpers import order_response
from services.market_service.schemas import (
    OrderResponse,
    OrderStatusUpdate,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
)
from services.market_service.services.catalog_store import with_new_price
from services.market_service.services.market import MarketState

router = APIRouter(tags=["farmer"])


def _editable_product(market: MarketState, account: Account, product_id: str) -> Product:
    product = market.catalog.require(product_id)
    if product.seller_id != account.id and not account.has_admin_access:
        raise PermissionDenied()
    return product


# ============================================================================
# PRODUCTS
# ============================================================================


@router.get("/products", response_model=list[ProductResponse])
async def list_my_products(
    current: CurrentSession = Depends(require_farmer),
    market: MarketState = Depends(get_market),
):
    """The farmer's listings, including disabled ones."""
    return market.catalog.list_products(
        include_disabled=True, seller_id=current.account.id
    )


@router.post(
    "/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED
)
async def create_product(
    product_in: ProductCreate,
    current: CurrentSession = Depends(require_farmer),
    market: MarketState = Depends(get_market),
):
    account = current.account
    seller_id = account.id
    if product_in.seller_id and account.has_admin_access:
        seller = market.accounts.get(product_in.seller_id)
        if seller is None or seller.role != UserRole.FARMER:
            raise AccountNotFound(account_id=product_in.seller_id)
        seller_id = seller.id

    data = product_in.model_dump(exclude={"seller_id"})
    product = await market.catalog.add_product({**data, "seller_id": seller_id})
    await market.audit.record(
        account,
        AuditAction.PRODUCT_ADDED,
        f"Added product {product.name} ({product.id}).",
    )
    market.notifier.success("catalog.productAdded")
    return product


@router.patch("/products/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    product_in: ProductUpdate,
    current: CurrentSession = Depends(require_farmer),
    market: MarketState = Depends(get_market),
):
    """Edit a listing. A price change is appended to its price history."""
    account = current.account
    _editable_product(market, account, product_id)

    changes = product_in.model_dump(exclude_unset=True)
    new_price = changes.pop("price", None)

    def apply_changes(product: Product) -> Product:
        product = product.model_copy(update=changes, deep=True)
        if new_price is not None:
            product = with_new_price(product, new_price, account.id)
        return product

    updated = await market.catalog.edit_product(product_id, apply_changes)
    fields = ", ".join(sorted(product_in.model_fields_set)) or "no changes"
    await market.audit.record(
        account,
        AuditAction.PRODUCT_UPDATED,
        f"Updated product {updated.name} ({updated.id}): {fields}.",
    )
    market.notifier.success("catalog.productUpdated")
    return updated


@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: str,
    current: CurrentSession = Depends(require_farmer),
    market: MarketState = Depends(get_market),
):
    account = current.account
    product = _editable_product(market, account, product_id)
    await market.catalog.delete_product(product_id)
    await market.audit.record(
        account,
        AuditAction.PRODUCT_DELETED,
        f"Deleted product {product.name} ({product.id}).",
    )
    market.notifier.success("catalog.productDeleted")


# ============================================================================
# ORDERS
# ============================================================================


@router.get("/orders", response_model=list[OrderResponse])
async def list_incoming_orders(
    current: CurrentSession = Depends(require_farmer),
    market: MarketState = Depends(get_market),
):
    """Orders for the farmer's produce, newest first."""
    return [order_response(o) for o in market.orders.for_seller(current.account.id)]


@router.patch("/orders/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    status_in: OrderStatusUpdate,
    current: CurrentSession = Depends(require_farmer),
    market: MarketState = Depends(get_market),
):
    """Move an order forward, e.g. Confirmed to Delivered."""
    account = current.account
    order = market.orders.get(order_id)
    if order.seller_id != account.id and not account.has_admin_access:
        raise OrderNotFound(order_id)

    updated = await market.orders.advance_status(order_id, status_in.status)
    await market.audit.record(
        account,
        AuditAction.ORDER_STATUS_UPDATE,
        f"Order {order_id} status {order.status.value} -> {updated.status.value}.",
    )
    return order_response(updated)
