"""Unit tests for the account/session store."""

from decimal import Decimal

import pytest
from services.market_service.errors import (
    AccountBlocked,
    AccountNotFound,
    DuplicateAccount,
    InsufficientWalletBalance,
    InvalidCredentials,
    PermissionDenied,
)
from services.market_service.models import AuditAction, UserRole
from tests.conftest import ADMIN, BUYER
from tests.factories import AccountFactory


@pytest.mark.asyncio
@pytest.mark.unit
async def test_register_creates_active_account_and_logs_in(market):
    account, session = await market.accounts.register(
        AccountFactory.registration(full_name="Asha"), "secret123"
    )

    assert account.active is True
    assert account.wallet_balance == Decimal("0")
    assert account.role == UserRole.BUYER
    assert account.password_hash != "secret123"
    assert market.accounts.resolve_session(session.id).id == account.id
    assert market.audit.entries(1)[0].action == AuditAction.USER_SIGNUP.value


@pytest.mark.asyncio
@pytest.mark.unit
async def test_register_duplicate_email_ignores_case(market):
    with pytest.raises(DuplicateAccount):
        await market.accounts.register(
            AccountFactory.registration(email="Buyer@Example.com"), "secret123"
        )
    assert len(market.accounts.list_accounts()) == 4


@pytest.mark.asyncio
@pytest.mark.unit
async def test_registered_farmer_is_listed(market):
    account, _ = await market.accounts.register(
        AccountFactory.farmer_registration(), "secret123"
    )

    assert account.id in {f.id for f in market.accounts.farmers()}


@pytest.mark.asyncio
@pytest.mark.unit
async def test_login_opens_independent_sessions(market):
    _, first = await market.accounts.login(*BUYER)
    _, second = await market.accounts.login("BUYER@example.com", BUYER[1], remember=True)

    assert first.id != second.id
    assert second.remember is True
    assert market.accounts.resolve_session(first.id).id == "u1"
    assert market.accounts.resolve_session(second.id).id == "u1"


@pytest.mark.asyncio
@pytest.mark.unit
@pytest.mark.parametrize(
    "email, password",
    [("buyer@example.com", "wrong"), ("nobody@example.com", "password123")],
)
async def test_login_bad_credentials(market, email, password):
    with pytest.raises(InvalidCredentials):
        await market.accounts.login(email, password)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_blocked_account_cannot_log_in(market):
    admin, _ = await market.accounts.login(*ADMIN)
    await market.accounts.set_account_active_status(admin, "u1", False)

    with pytest.raises(AccountBlocked):
        await market.accounts.login(*BUYER)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_blocking_is_visible_to_open_sessions(market, buyer_session):
    admin, _ = await market.accounts.login(*ADMIN)
    await market.accounts.set_account_active_status(admin, "u1", False)

    assert market.accounts.resolve_session(buyer_session).active is False

    await market.accounts.set_account_active_status(admin, "u1", True)
    assert market.accounts.resolve_session(buyer_session).active is True


@pytest.mark.asyncio
@pytest.mark.unit
async def test_only_admins_change_account_status(market):
    buyer, _ = await market.accounts.login(*BUYER)

    with pytest.raises(PermissionDenied):
        await market.accounts.set_account_active_status(buyer, "u2", False)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_owner_account_cannot_be_blocked(market):
    admin, _ = await market.accounts.login(*ADMIN)

    with pytest.raises(PermissionDenied):
        await market.accounts.set_account_active_status(admin, "u3", False)
    assert market.accounts.get("u3").active is True


@pytest.mark.asyncio
@pytest.mark.unit
async def test_status_change_for_unknown_account(market):
    admin, _ = await market.accounts.login(*ADMIN)

    with pytest.raises(AccountNotFound):
        await market.accounts.set_account_active_status(admin, "missing", False)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_logout_closes_session_and_clears_cart(market, buyer_session):
    market.carts.add_to_cart(buyer_session, "p1", 2)

    await market.accounts.logout(buyer_session)

    assert market.accounts.resolve_session(buyer_session) is None
    assert market.carts.lines(buyer_session) == []
    assert market.audit.entries(1)[0].action == AuditAction.USER_LOGOUT.value


@pytest.mark.asyncio
@pytest.mark.unit
async def test_update_profile_overwrites_own_record(market, buyer_session):
    account = market.accounts.resolve_session(buyer_session)
    edited = account.model_copy(update={"full_name": "John Q. Doe", "mobile": "9999999999"})

    updated = await market.accounts.update_profile(buyer_session, edited)

    assert updated.full_name == "John Q. Doe"
    assert market.accounts.get("u1").mobile == "9999999999"
    assert market.audit.entries(1)[0].action == AuditAction.PROFILE_UPDATE.value


@pytest.mark.asyncio
@pytest.mark.unit
async def test_update_profile_of_another_account_is_denied(market, buyer_session):
    farmer = market.accounts.get("u2")

    with pytest.raises(PermissionDenied):
        await market.accounts.update_profile(
            buyer_session, farmer.model_copy(update={"full_name": "Hijacked"})
        )
    assert market.accounts.get("u2").full_name == "Jane Farmer"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_update_profile_cannot_take_another_email(market, buyer_session):
    account = market.accounts.resolve_session(buyer_session)

    with pytest.raises(DuplicateAccount):
        await market.accounts.update_profile(
            buyer_session, account.model_copy(update={"email": "farmer@example.com"})
        )


@pytest.mark.asyncio
@pytest.mark.unit
async def test_forgot_password(market):
    market.accounts.forgot_password("farmer@example.com")

    with pytest.raises(AccountNotFound):
        market.accounts.forgot_password("nobody@example.com")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_debit_wallet_is_exact(market):
    account = await market.accounts.debit_wallet("u1", Decimal("33.33"))

    assert account.wallet_balance == Decimal("66.67")
    assert market.accounts.get("u1").wallet_balance == Decimal("66.67")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_debit_wallet_refuses_overdraft(market):
    with pytest.raises(InsufficientWalletBalance):
        await market.accounts.debit_wallet("u1", Decimal("100.01"))
    with pytest.raises(InsufficientWalletBalance):
        await market.accounts.debit_wallet("u3", Decimal("1"))

    assert market.accounts.get("u1").wallet_balance == Decimal("100")
