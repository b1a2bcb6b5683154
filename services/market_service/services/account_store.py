"""Account and session store.

Accounts are the registered users; sessions are the authenticated logins
that reference them by id. Because a session only holds the account id,
any change to the account (including an admin blocking it) is visible to
the session immediately.
"""

import asyncio
from decimal import Decimal
from typing import Optional

from libs.common.logging import get_logger
from services.market_service.errors import (
    AccountBlocked,
    AccountNotFound,
    DuplicateAccount,
    InsufficientWalletBalance,
    InvalidCredentials,
    PermissionDenied,
    PersistenceError,
)
from services.market_service.models import (
    Account,
    AuditAction,
    Session,
    UserRole,
    new_id,
)
from services.market_service.services.audit_trail import AuditTrail
from services.market_service.services.cart_engine import CartEngine
from services.market_service.services.notifications import Notifier
from services.market_service.services.passwords import hash_password, verify_password
from services.market_service.services.persistence import Snapshotter, SnapshotStore
from services.market_service.services.seed import seed_accounts

logger = get_logger(__name__)


def _same_email(a: str, b: str) -> bool:
    return a.strip().lower() == b.strip().lower()


class AccountStore:
    def __init__(
        self,
        audit: AuditTrail,
        carts: CartEngine,
        notifier: Notifier,
        store: Optional[SnapshotStore] = None,
    ):
        self._audit = audit
        self._carts = carts
        self._notifier = notifier
        self._account_snapshots = Snapshotter(store, "accounts", Account)
        self._session_snapshots = Snapshotter(store, "sessions", Session)
        self._accounts: list[Account] = []
        self._sessions: dict[str, Session] = {}
        self._wallet_locks: dict[str, asyncio.Lock] = {}

    async def load(self) -> None:
        self._accounts = await self._account_snapshots.load(seed_accounts)
        sessions = await self._session_snapshots.load(list)
        known = {a.id for a in self._accounts}
        self._sessions = {s.id: s for s in sessions if s.account_id in known}
        logger.info(
            "Accounts loaded: %d accounts, %d sessions",
            len(self._accounts),
            len(self._sessions),
        )

    async def _save_accounts(self) -> None:
        await self._account_snapshots.save(self._accounts)

    async def _save_sessions(self) -> None:
        await self._session_snapshots.save(list(self._sessions.values()))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _find(self, account_id: str) -> Optional[Account]:
        return next((a for a in self._accounts if a.id == account_id), None)

    def get(self, account_id: str) -> Optional[Account]:
        account = self._find(account_id)
        return account.model_copy(deep=True) if account else None

    def find_by_email(self, email: str) -> Optional[Account]:
        account = next((a for a in self._accounts if _same_email(a.email, email)), None)
        return account.model_copy(deep=True) if account else None

    def list_accounts(self) -> list[Account]:
        return [a.model_copy(deep=True) for a in self._accounts]

    def farmers(self) -> list[Account]:
        return [a.model_copy(deep=True) for a in self._accounts if a.role == UserRole.FARMER]

    def get_session(self, session_id: str) -> Optional[Session]:
        return self._sessions.get(session_id)

    def resolve_session(self, session_id: str) -> Optional[Account]:
        """The account behind an open session, or None."""
        session = self._sessions.get(session_id)
        if session is None:
            return None
        return self.get(session.account_id)

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def _open_session(self, account: Account, remember: bool) -> Session:
        session = Session(id=new_id("s"), account_id=account.id, remember=remember)
        self._sessions[session.id] = session
        await self._save_sessions()
        return session

    async def register(self, data: dict, password: str) -> tuple[Account, Session]:
        """Create an account and log it in straight away."""
        email = data["email"]
        if any(_same_email(a.email, email) for a in self._accounts):
            raise self._notifier.reject(DuplicateAccount(email))

        account = Account(
            **{
                **data,
                "id": new_id("u"),
                "password_hash": hash_password(password),
                "active": True,
                "wallet_balance": Decimal("0"),
            }
        )
        self._accounts.append(account)
        await self._save_accounts()
        session = await self._open_session(account, remember=False)

        await self._audit.record(
            account,
            AuditAction.USER_SIGNUP,
            f"New user {account.full_name} registered as a {account.role.value}.",
        )
        self._notifier.success("auth.signupSuccess", full_name=account.full_name)
        return account.model_copy(deep=True), session

    async def login(self, email: str, password: str, remember: bool = False) -> tuple[Account, Session]:
        account = next((a for a in self._accounts if _same_email(a.email, email)), None)
        if account is None or not verify_password(password, account.password_hash):
            raise self._notifier.reject(InvalidCredentials())
        if not account.active:
            raise self._notifier.reject(AccountBlocked())

        session = await self._open_session(account, remember)
        await self._audit.record(
            account, AuditAction.USER_LOGIN, f"User {account.full_name} logged in."
        )
        self._notifier.success("auth.welcomeBack", full_name=account.full_name)
        return account.model_copy(deep=True), session

    async def logout(self, session_id: str) -> None:
        """Close the session and drop its cart."""
        session = self._sessions.pop(session_id, None)
        self._carts.clear_cart(session_id)
        if session is None:
            return

        await self._save_sessions()
        account = self._find(session.account_id)
        await self._audit.record(
            account,
            AuditAction.USER_LOGOUT,
            f"User {account.full_name if account else session.account_id} logged out.",
        )
        self._notifier.success("auth.loggedOut")

    def forgot_password(self, email: str) -> None:
        if self.find_by_email(email) is None:
            raise self._notifier.reject(AccountNotFound(email=email))
        self._notifier.success("auth.resetLinkSent", email=email)

    # ------------------------------------------------------------------
    # Account mutations
    # ------------------------------------------------------------------

    async def update_profile(self, session_id: str, account: Account) -> Account:
        """Overwrite the session's own account record with ``account``."""
        current = self.resolve_session(session_id)
        if current is None or current.id != account.id:
            raise self._notifier.reject(PermissionDenied())
        if any(
            a.id != account.id and _same_email(a.email, account.email)
            for a in self._accounts
        ):
            raise self._notifier.reject(DuplicateAccount(account.email))

        self._accounts = [
            account.model_copy(deep=True) if a.id == account.id else a
            for a in self._accounts
        ]
        await self._save_accounts()
        await self._audit.record(
            account,
            AuditAction.PROFILE_UPDATE,
            f"User {account.full_name} updated their profile.",
        )
        self._notifier.success("auth.profileUpdated")
        return account.model_copy(deep=True)

    async def set_account_active_status(
        self, actor: Account, account_id: str, active: bool
    ) -> Account:
        """Administrative block/unblock. Owner accounts cannot be blocked."""
        if not actor.has_admin_access:
            raise self._notifier.reject(PermissionDenied())
        target = self._find(account_id)
        if target is None:
            raise self._notifier.reject(AccountNotFound(account_id=account_id))
        if target.is_owner and not active:
            raise self._notifier.reject(PermissionDenied())

        target.active = active
        await self._save_accounts()
        await self._audit.record(
            actor,
            AuditAction.USER_STATUS_UPDATE,
            f"Set {target.full_name} ({target.id}) to "
            f"{'active' if active else 'blocked'}.",
        )
        self._notifier.success("admin.userStatusUpdated")
        return target.model_copy(deep=True)

    async def debit_wallet(self, account_id: str, amount: Decimal) -> Account:
        """Take ``amount`` from the wallet, refusing if it would go negative
        or the account has no wallet."""
        lock = self._wallet_locks.setdefault(account_id, asyncio.Lock())
        async with lock:
            account = self._find(account_id)
            if account is None:
                raise AccountNotFound(account_id=account_id)
            balance = account.wallet_balance
            if balance is None or balance < amount:
                raise self._notifier.reject(InsufficientWalletBalance(balance, amount))

            account.wallet_balance = balance - amount
            try:
                await self._save_accounts()
            except PersistenceError:
                account.wallet_balance = balance
                raise

        logger.info(
            "Debit %s from wallet of %s, balance %s -> %s",
            amount,
            account_id,
            balance,
            account.wallet_balance,
        )
        return account.model_copy(deep=True)

    async def refund_wallet(self, account_id: str, amount: Decimal) -> None:
        """Give back a debit whose order could not be completed."""
        lock = self._wallet_locks.setdefault(account_id, asyncio.Lock())
        async with lock:
            account = self._find(account_id)
            if account is None or account.wallet_balance is None:
                return
            account.wallet_balance += amount
            await self._save_accounts()
        logger.info("Refunded %s to wallet of %s", amount, account_id)
