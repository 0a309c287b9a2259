"""
Coupon schemas for request/response validation
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal
import uuid

from app.models import DiscountType
from app.schemas.base import BaseSchema, Money

class CouponCreate(BaseModel):
    """
    Coupon definition

    Business rules (code length, value ranges, date window) are checked by
    the service so that all violations are reported together.
    """
    code: str = Field(..., max_length=50)
    description: Optional[str] = None
    discount_type: str
    discount_value: Decimal
    min_order_value: Optional[Decimal] = None
    max_discount: Optional[Decimal] = None
    max_usage: Optional[int] = None
    max_usage_per_user: Optional[int] = None
    start_date: datetime
    end_date: datetime
    is_active: bool = True
    is_public: bool = False

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v):
        return v.strip().upper()

    @field_validator("discount_type")
    @classmethod
    def normalize_type(cls, v):
        return v.strip().upper()

class CouponUpdate(BaseModel):
    code: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None
    discount_type: Optional[str] = None
    discount_value: Optional[Decimal] = None
    min_order_value: Optional[Decimal] = None
    max_discount: Optional[Decimal] = None
    max_usage: Optional[int] = None
    max_usage_per_user: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: Optional[bool] = None
    is_public: Optional[bool] = None

    @field_validator("code", "discount_type")
    @classmethod
    def normalize_upper(cls, v):
        return v.strip().upper() if v is not None else v

class CouponApplyRequest(BaseModel):
    """Preview a coupon against an order amount"""
    code: str = Field(..., min_length=1, max_length=50)
    total_amount: Decimal = Field(..., ge=0)

class CouponResponse(BaseSchema):
    id: uuid.UUID
    code: str
    description: Optional[str] = None
    discount_type: DiscountType
    discount_value: Money
    min_order_value: Money
    max_discount: Optional[Money] = None
    max_usage: Optional[int] = None
    max_usage_per_user: Optional[int] = None
    used_count: int
    start_date: datetime
    end_date: datetime
    is_active: bool
    is_public: bool
    created_at: datetime

class PublicCouponResponse(BaseSchema):
    """Coupon fields safe to show to shoppers"""
    code: str
    description: Optional[str] = None
    discount_type: DiscountType
    discount_value: Money
    min_order_value: Money
    max_discount: Optional[Money] = None
    end_date: datetime

class CouponPreview(BaseModel):
    code: str
    discount_type: DiscountType
    discount_amount: Money
    total_amount: Money
    final_amount: Money
