"""Accounts router: registration, sessions and the caller's profile."""

from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from libs.auth.tokens import issue_session_token
from libs.common.rate_limit import auth_limit
from libs.common.sms import send_confirmation_sms
from services.market_service.dependencies import (
    CurrentSession,
    get_active_session,
    get_current_session,
    get_market,
)
from services.market_service.errors import FieldValidationError
from services.market_service.models import Account, Session, UserRole
from services.market_service.schemas import (
    AccountResponse,
    ForgotPasswordRequest,
    LoginRequest,
    NotificationResponse,
    ProfileUpdate,
    RegisterRequest,
    SessionResponse,
)
from services.market_service.services.market import MarketState

router = APIRouter(tags=["accounts"])


def _session_response(account: Account, session: Session) -> SessionResponse:
    return SessionResponse(
        access_token=issue_session_token(account.id, session.id, session.remember),
        account=AccountResponse.model_validate(account),
    )


# ============================================================================
# SESSIONS
# ============================================================================


@router.post(
    "/auth/register",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    register_in: RegisterRequest,
    background_tasks: BackgroundTasks,
    market: MarketState = Depends(get_market),
):
    """Create a buyer or farmer account and log it in."""
    if register_in.role == UserRole.ADMIN:
        raise FieldValidationError("role")

    data = register_in.model_dump(exclude={"password"})
    account, session = await market.accounts.register(data, register_in.password)
    background_tasks.add_task(send_confirmation_sms, account.mobile, account.full_name)
    return _session_response(account, session)


@router.post("/auth/login", response_model=SessionResponse)
@auth_limit
async def login(
    request: Request,
    login_in: LoginRequest,
    market: MarketState = Depends(get_market),
):
    account, session = await market.accounts.login(
        login_in.email, login_in.password, login_in.remember
    )
    return _session_response(account, session)


@router.post("/auth/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    current: CurrentSession = Depends(get_current_session),
    market: MarketState = Depends(get_market),
):
    """Close the session. Its cart is discarded."""
    await market.accounts.logout(current.session_id)


@router.post("/auth/forgot-password", status_code=status.HTTP_202_ACCEPTED)
@auth_limit
async def forgot_password(
    request: Request,
    forgot_in: ForgotPasswordRequest,
    market: MarketState = Depends(get_market),
):
    market.accounts.forgot_password(forgot_in.email)
    return {"status": "sent"}


# ============================================================================
# PROFILE
# ============================================================================


@router.get("/me", response_model=AccountResponse)
async def get_me(current: CurrentSession = Depends(get_current_session)):
    return current.account


@router.patch("/me", response_model=AccountResponse)
async def update_me(
    profile_in: ProfileUpdate,
    current: CurrentSession = Depends(get_active_session),
    market: MarketState = Depends(get_market),
):
    """Update the caller's own profile fields."""
    changes = profile_in.model_dump(exclude_unset=True)
    account = Account.model_validate({**current.account.model_dump(), **changes})
    return await market.accounts.update_profile(current.session_id, account)


@router.get("/me/notifications", response_model=list[NotificationResponse])
async def list_notifications(
    current: CurrentSession = Depends(get_current_session),
    market: MarketState = Depends(get_market),
):
    """Notifications still within their display window."""
    return market.notifications.active()
