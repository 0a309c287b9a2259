"""
Order schemas for request/response validation
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List, Dict, Any
from datetime import datetime
import uuid

from app.models.order import OrderStatus, PaymentStatus
from app.schemas.base import BaseSchema, Money
from app.api.v1.cart.schemas import ShippingAddress

class OrderCreate(BaseModel):
    """
    Place an order from the active cart

    Without a shipping address in the body, the address chosen in the cart
    settings is used, then the user's saved address.
    """
    payment_method: str = Field(..., min_length=1, max_length=50)
    shipping_address: Optional[ShippingAddress] = None
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("payment_method")
    @classmethod
    def normalize_payment_method(cls, v):
        v = v.strip().upper()
        if not v:
            raise ValueError("Payment method is required")
        return v

class OrderCancelRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)

class OrderStatusUpdate(BaseModel):
    """Admin change of order and payment status"""
    status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None
    admin_notes: Optional[str] = Field(None, max_length=1000)
    reason: Optional[str] = Field(None, max_length=500)

    @model_validator(mode="after")
    def check_not_empty(self):
        if self.status is None and self.payment_status is None and self.admin_notes is None:
            raise ValueError("No status updates provided")
        return self

class OrderItemResponse(BaseSchema):
    id: uuid.UUID
    product_id: uuid.UUID
    variant_id: Optional[uuid.UUID] = None
    product_name: str
    image: Optional[str] = None
    sku: Optional[str] = None
    color: Optional[str] = None
    size: Optional[str] = None
    quantity: int
    price: Money
    total_price: Money

class StatusHistoryResponse(BaseSchema):
    status: OrderStatus
    previous_status: Optional[OrderStatus] = None
    reason: Optional[str] = None
    created_at: datetime

class OrderResponse(BaseSchema):
    """Order with items and status history"""
    id: uuid.UUID
    order_number: str
    user_id: uuid.UUID
    status: OrderStatus
    payment_status: PaymentStatus
    items_price: Money
    tax_price: Money
    shipping_price: Money
    discount_amount: Money
    total_amount: Money
    currency: str
    coupon_id: Optional[uuid.UUID] = None
    payment_method: str
    shipping_method: Optional[str] = None
    shipping_address: Dict[str, Any]
    notes: Optional[str] = None
    cancellation_reason: Optional[str] = None
    delivered_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    items: List[OrderItemResponse] = Field(default_factory=list)
    status_history: List[StatusHistoryResponse] = Field(default_factory=list)
    created_at: datetime

class AdminOrderResponse(OrderResponse):
    admin_notes: Optional[str] = None

class OrderTrackingItem(BaseSchema):
    product_name: str
    image: Optional[str] = None
    quantity: int
    price: Money
    color: Optional[str] = None
    size: Optional[str] = None

class OrderTrackingResponse(BaseSchema):
    """Public view of an order looked up by its number"""
    order_number: str
    status: OrderStatus
    payment_status: PaymentStatus
    total_amount: Money
    created_at: datetime
    delivered_at: Optional[datetime] = None
    items: List[OrderTrackingItem] = Field(default_factory=list)
