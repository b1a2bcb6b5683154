"""Market Service models package."""

from services.market_service.models.domain import (
    Account,
    Address,
    AuditLogEntry,
    CartLine,
    Category,
    Order,
    PaymentDetails,
    PriceChange,
    Product,
    Session,
    new_id,
)
from services.market_service.models.enums import (
    AuditAction,
    FarmerType,
    NotificationSeverity,
    OrderStatus,
    PaymentMethod,
    UserRole,
)
from services.market_service.models.snapshot import StateSnapshot

__all__ = [
    "Account",
    "Address",
    "AuditAction",
    "AuditLogEntry",
    "CartLine",
    "Category",
    "FarmerType",
    "NotificationSeverity",
    "Order",
    "OrderStatus",
    "PaymentDetails",
    "PaymentMethod",
    "PriceChange",
    "Product",
    "Session",
    "StateSnapshot",
    "UserRole",
    "new_id",
]
