"""Enum definitions for market service models."""

import enum


class UserRole(str, enum.Enum):
    BUYER = "Buyer"
    FARMER = "Farmer"
    ADMIN = "Admin"


class FarmerType(str, enum.Enum):
    VEGETABLES = "Vegetables"
    FRUITS = "Fruits"
    GRAINS = "Grains"
    MIXED = "Mixed"


class OrderStatus(str, enum.Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    DELIVERED = "Delivered"

    @property
    def rank(self) -> int:
        return _ORDER_STATUS_RANK[self]


_ORDER_STATUS_RANK = {
    OrderStatus.PENDING: 0,
    OrderStatus.CONFIRMED: 1,
    OrderStatus.DELIVERED: 2,
}


class PaymentMethod(str, enum.Enum):
    UPI = "upi"
    CARD = "card"
    COD = "cod"
    WALLET = "wallet"


class NotificationSeverity(str, enum.Enum):
    SUCCESS = "success"
    ERROR = "error"


class AuditAction(str, enum.Enum):
    USER_SIGNUP = "User Signup"
    USER_LOGIN = "User Login"
    USER_LOGOUT = "User Logout"
    PROFILE_UPDATE = "Profile Update"
    USER_STATUS_UPDATE = "User Status Update"
    USER_DATA_EXPORT = "User Data Export"
    ORDER_PLACED = "Order Placed"
    ORDER_STATUS_UPDATE = "Order Status Update"
    PRODUCT_ADDED = "Product Added"
    PRODUCT_UPDATED = "Product Updated"
    PRODUCT_DELETED = "Product Deleted"
    PRICE_UPDATE = "Price Update"
    AI_PRICE_SUGGESTION = "AI Price Suggestion"
