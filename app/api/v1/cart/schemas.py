"""
Cart schemas for request/response validation
"""

from pydantic import BaseModel, Field, model_validator
from typing import Optional, List, Dict, Any
from datetime import datetime
from decimal import Decimal
import uuid

from app.models import CartStatus, DiscountType
from app.schemas.base import BaseSchema, Money

class CartItemCreate(BaseModel):
    """Add a product variant to the cart"""
    product_id: uuid.UUID
    variant_id: uuid.UUID
    quantity: int = Field(1, ge=1, le=100)
    customization: Optional[Dict[str, Any]] = None
    is_gift: bool = False
    gift_message: Optional[str] = Field(None, max_length=500)

class CartItemUpdate(BaseModel):
    quantity: int = Field(..., ge=1, le=100)

class CartItemDetailsUpdate(BaseModel):
    """Gift and customization options; omitted fields keep their value"""
    is_gift: Optional[bool] = None
    gift_message: Optional[str] = Field(None, max_length=500)
    customization: Optional[Dict[str, Any]] = None

class ShippingAddress(BaseModel):
    full_name: str = Field(..., min_length=2, max_length=100)
    phone: str = Field(..., max_length=20)
    address: str = Field(..., min_length=5, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, max_length=100)

class CartSettingsUpdate(BaseModel):
    payment_method: Optional[str] = Field(None, max_length=50)
    shipping_method: Optional[str] = Field(None, max_length=50)
    shipping_address: Optional[ShippingAddress] = None
    notes: Optional[str] = Field(None, max_length=1000)
    estimated_delivery: Optional[datetime] = None
    currency: Optional[str] = Field(None, min_length=3, max_length=3)

    @model_validator(mode="after")
    def check_not_empty(self):
        if not self.model_fields_set:
            raise ValueError("No cart settings provided")
        return self

class ApplyCouponRequest(BaseModel):
    coupon_code: str = Field(..., min_length=1, max_length=50)

class CartItemResponse(BaseSchema):
    id: uuid.UUID
    product_id: uuid.UUID
    variant_id: uuid.UUID
    quantity: int
    original_price: Money
    sale_price: Money
    price: Money
    total_price: Money
    product_name: str
    product_image: Optional[str] = None
    product_slug: Optional[str] = None
    sku: Optional[str] = None
    stock: Optional[int] = None
    color: Optional[str] = None
    size: Optional[str] = None
    customization: Optional[Dict[str, Any]] = None
    is_gift: bool
    gift_message: Optional[str] = None
    created_at: datetime

class AppliedCoupon(BaseSchema):
    id: uuid.UUID
    code: str
    description: Optional[str] = None
    discount_type: DiscountType
    discount_value: Money

class CartResponse(BaseSchema):
    """Cart with its items and derived totals"""
    id: Optional[uuid.UUID] = None
    status: CartStatus = CartStatus.ACTIVE
    items: List[CartItemResponse] = Field(default_factory=list)
    total_items: int = 0
    subtotal: Money = Decimal("0.00")
    tax_amount: Money = Decimal("0.00")
    shipping_amount: Money = Decimal("0.00")
    discount_amount: Money = Decimal("0.00")
    total: Money = Decimal("0.00")
    coupon: Optional[AppliedCoupon] = None
    payment_method: Optional[str] = None
    shipping_method: Optional[str] = None
    shipping_address: Optional[Dict[str, Any]] = None
    currency: str = "USD"
    notes: Optional[str] = None
    estimated_delivery: Optional[datetime] = None
