"""Admin router: user management, audit trail and marketplace oversight."""

import csv
import io
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response
from libs.common.rate_limit import admin_limit
from services.market_service.dependencies import (
    CurrentSession,
    get_market,
    require_admin,
)
from services.market_service.models import AuditAction, UserRole
from services.market_service.routers._helpers import order_response
from services.market_service.schemas import (
    AccountResponse,
    AccountStatusUpdate,
    AuditLogResponse,
    OrderResponse,
    ProductResponse,
)
from services.market_service.services.market import MarketState

router = APIRouter(tags=["admin"])

USER_EXPORT_COLUMNS = ["id", "full_name", "email", "role", "active"]


# ============================================================================
# USERS
# ============================================================================


@router.get("/users", response_model=list[AccountResponse])
@admin_limit
async def list_users(
    request: Request,
    role: Optional[UserRole] = Query(None),
    current: CurrentSession = Depends(require_admin),
    market: MarketState = Depends(get_market),
):
    accounts = market.accounts.list_accounts()
    if role:
        accounts = [a for a in accounts if a.role == role]
    return accounts


@router.patch("/users/{account_id}/status", response_model=AccountResponse)
@admin_limit
async def set_user_status(
    request: Request,
    account_id: str,
    status_in: AccountStatusUpdate,
    current: CurrentSession = Depends(require_admin),
    market: MarketState = Depends(get_market),
):
    """Block or unblock an account. Owner accounts cannot be blocked."""
    return await market.accounts.set_account_active_status(
        current.account, account_id, status_in.active
    )


@router.get("/users/export")
@admin_limit
async def export_users(
    request: Request,
    current: CurrentSession = Depends(require_admin),
    market: MarketState = Depends(get_market),
):
    """Download every account as CSV."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(USER_EXPORT_COLUMNS)
    for account in market.accounts.list_accounts():
        writer.writerow(
            [account.id, account.full_name, account.email, account.role.value, account.active]
        )

    await market.audit.record(
        current.account,
        AuditAction.USER_DATA_EXPORT,
        "Admin exported user data to CSV.",
    )
    return Response(
        content=buffer.getvalue(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="users.csv"'},
    )


# ============================================================================
# AUDIT & OVERSIGHT
# ============================================================================


@router.get("/audit-logs", response_model=list[AuditLogResponse])
@admin_limit
async def list_audit_logs(
    request: Request,
    limit: Optional[int] = Query(None, ge=1, le=1000),
    current: CurrentSession = Depends(require_admin),
    market: MarketState = Depends(get_market),
):
    """Audit trail, newest first."""
    return market.audit.entries(limit)


@router.get("/orders", response_model=list[OrderResponse])
@admin_limit
async def list_all_orders(
    request: Request,
    current: CurrentSession = Depends(require_admin),
    market: MarketState = Depends(get_market),
):
    return [order_response(o) for o in market.orders.all()]


@router.get("/products", response_model=list[ProductResponse])
@admin_limit
async def list_all_products(
    request: Request,
    current: CurrentSession = Depends(require_admin),
    market: MarketState = Depends(get_market),
):
    """Every product, including disabled ones."""
    return market.catalog.list_products(include_disabled=True)
