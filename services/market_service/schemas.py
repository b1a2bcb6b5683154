"""Pydantic schemas for the market service API."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from services.market_service.models import (
    Address,
    FarmerType,
    OrderStatus,
    PaymentDetails,
    PaymentMethod,
    PriceChange,
    UserRole,
)

# ============================================================================
# CATALOG SCHEMAS
# ============================================================================


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    image_url: Optional[str] = None


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    price: Decimal = Field(..., ge=0)
    stock: int = Field(..., ge=0)
    unit: str = Field(..., min_length=1, max_length=32)
    category: str = Field(..., min_length=1, max_length=100)
    description: str = ""
    image_url: Optional[str] = None
    harvest_date: Optional[date] = None
    is_organic: bool = False
    enabled: bool = True


class ProductCreate(ProductBase):
    # Admins may list on behalf of a farmer; farmers always list as themselves.
    seller_id: Optional[str] = None


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    price: Optional[Decimal] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)
    unit: Optional[str] = Field(None, min_length=1, max_length=32)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    image_url: Optional[str] = None
    harvest_date: Optional[date] = None
    is_organic: Optional[bool] = None
    enabled: Optional[bool] = None


class ProductResponse(ProductBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    seller_id: str
    price_history: list[PriceChange] = []


class FarmerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    full_name: str
    farm_location: Optional[str] = None
    farm_city: Optional[str] = None
    farm_district: Optional[str] = None
    farm_state: Optional[str] = None
    farmer_type: Optional[FarmerType] = None
    is_verified: bool = False


# ============================================================================
# CART SCHEMAS
# ============================================================================


class CartItemCreate(BaseModel):
    product_id: str
    quantity: int = 1


class CartItemUpdate(BaseModel):
    quantity: int


class CartLineResponse(BaseModel):
    product: ProductResponse
    quantity: int
    line_total: Decimal


class CartResponse(BaseModel):
    items: list[CartLineResponse]
    count: int
    subtotal: Decimal
    seller_id: Optional[str] = None


class ShippingQuoteRequest(BaseModel):
    address: Address


class ShippingQuoteResponse(BaseModel):
    subtotal: Decimal
    shipping_fee: Decimal
    total: Decimal
    currency: str


# ============================================================================
# ORDER SCHEMAS
# ============================================================================


class CheckoutRequest(BaseModel):
    shipping_address: Address
    # Validated by the placement protocol so an unknown method gets its own error.
    payment_method: str


class OrderLineResponse(BaseModel):
    product_id: str
    name: str
    unit: str
    price: Decimal
    quantity: int
    line_total: Decimal


class OrderResponse(BaseModel):
    id: str
    buyer_id: str
    seller_id: str
    items: list[OrderLineResponse]
    subtotal: Decimal
    shipping_fee: Decimal
    total: Decimal
    status: OrderStatus
    shipping_address: Address
    payment_method: PaymentMethod
    created_at: datetime


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


# ============================================================================
# ACCOUNT SCHEMAS
# ============================================================================


class RegisterRequest(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    mobile: str = Field(..., min_length=10, max_length=15)
    password: str = Field(..., min_length=6)
    role: UserRole = UserRole.BUYER
    delivery_address: Optional[Address] = None
    farm_location: Optional[str] = None
    farm_city: Optional[str] = None
    farm_district: Optional[str] = None
    farm_state: Optional[str] = None
    farmer_type: Optional[FarmerType] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str
    remember: bool = False


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ProfileUpdate(BaseModel):
    """Self-editable fields. Role, status, wallet and password are not."""

    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    mobile: Optional[str] = Field(None, min_length=10, max_length=15)
    delivery_address: Optional[Address] = None
    farm_location: Optional[str] = None
    farm_city: Optional[str] = None
    farm_district: Optional[str] = None
    farm_state: Optional[str] = None
    farmer_type: Optional[FarmerType] = None
    payment_details: Optional[PaymentDetails] = None


class AccountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    full_name: str
    email: str
    mobile: str
    role: UserRole
    active: bool
    is_owner: bool
    is_verified: bool
    wallet_balance: Optional[Decimal] = None
    delivery_address: Optional[Address] = None
    farm_location: Optional[str] = None
    farm_city: Optional[str] = None
    farm_district: Optional[str] = None
    farm_state: Optional[str] = None
    farmer_type: Optional[FarmerType] = None
    payment_details: Optional[PaymentDetails] = None


class SessionResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    account: AccountResponse


class AccountStatusUpdate(BaseModel):
    active: bool


class AuditLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    timestamp: datetime
    actor_id: str
    actor_name: str
    action: str
    details: str


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    message: str
    severity: str
    created_at: datetime


# ============================================================================
# ASSISTANT SCHEMAS
# ============================================================================


class PriceSuggestionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: str
    suggested_price: Decimal
    reason: str = ""


class ApplyPriceRequest(BaseModel):
    product_id: str
    price: Decimal = Field(..., ge=0)
