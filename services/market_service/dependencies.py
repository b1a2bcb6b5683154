"""FastAPI dependencies for the market service."""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from libs.auth.dependencies import get_optional_claims
from libs.auth.models import SessionClaims
from services.market_service.errors import (
    AccountBlocked,
    NotAuthenticated,
    PermissionDenied,
)
from services.market_service.models import Account, UserRole
from services.market_service.services.market import MarketState


@dataclass
class CurrentSession:
    session_id: str
    account: Account


def get_market(request: Request) -> MarketState:
    return request.app.state.market


async def get_optional_session(
    claims: Optional[SessionClaims] = Depends(get_optional_claims),
    market: MarketState = Depends(get_market),
) -> Optional[CurrentSession]:
    """Resolve the bearer token to an open session, or None.

    A token only counts while its session exists, so logging out
    invalidates it even before it expires.
    """
    if claims is None:
        return None
    account = market.accounts.resolve_session(claims.session_id)
    if account is None or account.id != claims.account_id:
        return None
    return CurrentSession(session_id=claims.session_id, account=account)


async def get_current_session(
    current: Optional[CurrentSession] = Depends(get_optional_session),
) -> CurrentSession:
    if current is None:
        raise NotAuthenticated()
    return current


async def get_active_session(
    current: CurrentSession = Depends(get_current_session),
) -> CurrentSession:
    """Like ``get_current_session`` but rejects blocked accounts."""
    if not current.account.active:
        raise AccountBlocked()
    return current


async def require_farmer(
    current: CurrentSession = Depends(get_active_session),
) -> CurrentSession:
    """Farmers manage their own listings; admins may act on any."""
    account = current.account
    if account.role != UserRole.FARMER and not account.has_admin_access:
        raise PermissionDenied()
    return current


async def require_admin(
    current: CurrentSession = Depends(get_active_session),
) -> CurrentSession:
    if not current.account.has_admin_access:
        raise PermissionDenied()
    return current
