"""Market error taxonomy.

Every error is a terminal, per-attempt outcome: the operation that raised
it has not mutated any state. ``code`` is stable for API clients,
``message_key``/``params`` feed the translation lookup.
"""

from decimal import Decimal
from typing import Any, Optional

from libs.common.messages import t


class MarketError(Exception):
    code = "MARKET_ERROR"
    status_code = 400
    message_key = "validation.invalid"

    def __init__(self, **params: Any):
        self.params = params
        super().__init__(self.message)

    @property
    def message(self) -> str:
        return t(self.message_key, **self.params)

    def to_dict(self) -> dict:
        return {
            "detail": self.message,
            "code": self.code,
            "params": {k: _jsonable(v) for k, v in self.params.items()},
        }


def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    return value


# ---------------------------------------------------------------------------
# Stock
# ---------------------------------------------------------------------------


class ProductNotFound(MarketError):
    code = "PRODUCT_NOT_FOUND"
    status_code = 404
    message_key = "cart.productNotFound"

    def __init__(self, product_id: str):
        super().__init__(product_id=product_id)


class OutOfStock(MarketError):
    code = "OUT_OF_STOCK"
    status_code = 409
    message_key = "cart.outOfStock"

    def __init__(self, product_id: str, product_name: str):
        super().__init__(product_id=product_id, product_name=product_name)


class InsufficientStock(MarketError):
    code = "INSUFFICIENT_STOCK"
    status_code = 409
    message_key = "cart.onlyAvailable"

    def __init__(
        self,
        available: int,
        product_id: str,
        product_name: str = "",
        unit: str = "",
        at_placement: bool = False,
    ):
        if at_placement:
            self.message_key = "order.insufficientStock"
        super().__init__(
            available=available,
            count=available,
            product_id=product_id,
            product_name=product_name,
            unit=unit,
        )

    @property
    def available(self) -> int:
        return self.params["available"]


class MixedSellerCart(MarketError):
    code = "MIXED_SELLER_CART"
    status_code = 409
    message_key = "cart.mixedSeller"

    def __init__(self, product_id: str, product_name: str, cart_seller_id: str):
        super().__init__(
            product_id=product_id,
            product_name=product_name,
            cart_seller_id=cart_seller_id,
        )


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


class DuplicateAccount(MarketError):
    code = "DUPLICATE_ACCOUNT"
    status_code = 409
    message_key = "auth.duplicateAccount"

    def __init__(self, email: str):
        super().__init__(email=email)


class AccountBlocked(MarketError):
    code = "ACCOUNT_BLOCKED"
    status_code = 403
    message_key = "auth.blocked"


class InvalidCredentials(MarketError):
    code = "INVALID_CREDENTIALS"
    status_code = 401
    message_key = "auth.invalidCredentials"


class AccountNotFound(MarketError):
    code = "ACCOUNT_NOT_FOUND"
    status_code = 404
    message_key = "auth.accountNotFound"

    def __init__(self, email: str = "", account_id: Optional[str] = None):
        super().__init__(email=email or account_id or "", account_id=account_id)


class NotAuthenticated(MarketError):
    code = "NOT_AUTHENTICATED"
    status_code = 401
    message_key = "auth.notAuthenticated"


class PermissionDenied(MarketError):
    code = "PERMISSION_DENIED"
    status_code = 403
    message_key = "auth.permissionDenied"


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


class EmptyCartOrNoSession(MarketError):
    code = "EMPTY_CART_OR_NO_SESSION"
    status_code = 400
    message_key = "order.emptyCartOrNoSession"


class InsufficientWalletBalance(MarketError):
    code = "INSUFFICIENT_WALLET_BALANCE"
    status_code = 402
    message_key = "order.insufficientWallet"

    def __init__(self, balance: Optional[Decimal], required: Decimal):
        super().__init__(balance=balance, required=required)


class OrderNotFound(MarketError):
    code = "ORDER_NOT_FOUND"
    status_code = 404
    message_key = "order.notFound"

    def __init__(self, order_id: str):
        super().__init__(order_id=order_id)


class InvalidStatusTransition(MarketError):
    code = "INVALID_STATUS_TRANSITION"
    status_code = 409
    message_key = "order.invalidStatusTransition"

    def __init__(self, current: str, requested: str):
        super().__init__(current=current, requested=requested)


# ---------------------------------------------------------------------------
# Input / infrastructure
# ---------------------------------------------------------------------------


class FieldValidationError(MarketError):
    code = "VALIDATION_ERROR"
    status_code = 422

    def __init__(self, field: str, message_key: str = "validation.invalid"):
        self.message_key = message_key
        super().__init__(field=field)

    @property
    def field(self) -> str:
        return self.params["field"]


class AssistantUnavailable(MarketError):
    code = "ASSISTANT_UNAVAILABLE"
    status_code = 502
    message_key = "assistant.unavailable"


class PersistenceError(MarketError):
    code = "PERSISTENCE_ERROR"
    status_code = 503
    message_key = "system.persistenceFailed"

    def __init__(self, snapshot: str):
        super().__init__(snapshot=snapshot)
