"""Market domain records.

These are the in-memory records owned by the stores. They are pydantic
models so the persistence layer can snapshot them with ``model_dump`` and
rebuild them with ``model_validate``.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from libs.common.datetime_utils import utc_now
from pydantic import BaseModel, ConfigDict, Field
from services.market_service.models.enums import (
    FarmerType,
    OrderStatus,
    PaymentMethod,
    UserRole,
)


def new_id(prefix: str) -> str:
    """Fresh unique identifier, e.g. ``p_3f2a...``."""
    return f"{prefix}_{uuid.uuid4().hex[:16]}"


# ============================================================================
# CATALOG
# ============================================================================


class Category(BaseModel):
    id: str
    name: str
    image_url: Optional[str] = None


class PriceChange(BaseModel):
    model_config = ConfigDict(frozen=True)

    price: Decimal
    changed_at: datetime = Field(default_factory=utc_now)
    changed_by: str


class Product(BaseModel):
    """A sellable item. ``stock`` is the live count held by the catalog."""

    id: str
    name: str
    price: Decimal = Field(..., ge=0)
    stock: int = Field(..., ge=0)
    unit: str
    category: str
    seller_id: str
    enabled: bool = True
    description: str = ""
    image_url: Optional[str] = None
    harvest_date: Optional[date] = None
    is_organic: bool = False
    price_history: list[PriceChange] = Field(default_factory=list)


# ============================================================================
# CART
# ============================================================================


class CartLine(BaseModel):
    """One cart entry. ``snapshot`` is a copy of the product when it was added,
    used for display and pricing; stock checks always go to the catalog."""

    model_config = ConfigDict(frozen=True)

    snapshot: Product
    quantity: int = Field(..., ge=1)

    @property
    def product_id(self) -> str:
        return self.snapshot.id

    @property
    def line_total(self) -> Decimal:
        return self.snapshot.price * self.quantity


# ============================================================================
# ACCOUNTS
# ============================================================================


class Address(BaseModel):
    full_name: str = ""
    phone: str = ""
    street: str = ""
    city: str = ""
    district: str = ""
    state: str = ""
    country: str = ""
    pincode: str = ""


class PaymentDetails(BaseModel):
    upi_id: str
    qr_code_url: Optional[str] = None


class Account(BaseModel):
    id: str
    full_name: str
    email: str
    mobile: str
    password_hash: str
    role: UserRole
    active: bool = True
    is_owner: bool = False
    is_verified: bool = False
    wallet_balance: Optional[Decimal] = None
    delivery_address: Optional[Address] = None

    # Farmer-specific
    farm_location: Optional[str] = None
    farm_city: Optional[str] = None
    farm_district: Optional[str] = None
    farm_state: Optional[str] = None
    farmer_type: Optional[FarmerType] = None
    payment_details: Optional[PaymentDetails] = None

    @property
    def has_admin_access(self) -> bool:
        """Owners get full admin access whatever their role."""
        return self.is_owner or self.role == UserRole.ADMIN


class Session(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    account_id: str
    remember: bool = False
    created_at: datetime = Field(default_factory=utc_now)


# ============================================================================
# ORDERS & AUDIT
# ============================================================================


class Order(BaseModel):
    id: str
    buyer_id: str
    seller_id: str
    items: list[CartLine]
    subtotal: Decimal
    shipping_fee: Decimal
    total: Decimal
    status: OrderStatus = OrderStatus.CONFIRMED
    shipping_address: Address
    payment_method: PaymentMethod
    created_at: datetime = Field(default_factory=utc_now)


class AuditLogEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: datetime = Field(default_factory=utc_now)
    actor_id: str
    actor_name: str
    action: str
    details: str
