"""
Shopping cart models
One ACTIVE cart per user holding priced line items
"""

from sqlalchemy import (
    Column, String, Integer, Numeric, Boolean, ForeignKey, Index, UniqueConstraint,
    CheckConstraint, Text, JSON, DateTime, Enum, Uuid
)
from sqlalchemy.orm import relationship
from decimal import Decimal
import enum

from .base import Base, TimestampedModel, UUIDModel

class CartStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"

class Cart(Base, TimestampedModel, UUIDModel):
    """Cart aggregate; totals are derived from its items"""

    __tablename__ = "carts"

    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(Enum(CartStatus), default=CartStatus.ACTIVE, nullable=False)

    # Derived totals
    subtotal = Column(Numeric(10, 2), default=Decimal("0.00"), nullable=False)
    tax_amount = Column(Numeric(10, 2), default=Decimal("0.00"), nullable=False)
    shipping_amount = Column(Numeric(10, 2), default=Decimal("0.00"), nullable=False)
    discount_amount = Column(Numeric(10, 2), default=Decimal("0.00"), nullable=False)
    total = Column(Numeric(10, 2), default=Decimal("0.00"), nullable=False)
    total_items = Column(Integer, default=0, nullable=False)

    # Checkout settings
    coupon_id = Column(Uuid, ForeignKey("coupons.id", ondelete="SET NULL"), nullable=True)
    payment_method = Column(String(50), nullable=True)
    shipping_method = Column(String(50), nullable=True)
    shipping_address = Column(JSON, nullable=True)
    currency = Column(String(3), default="USD", nullable=False)
    notes = Column(Text, nullable=True)
    estimated_delivery = Column(DateTime, nullable=True)

    # Relationships
    items = relationship(
        "CartItem",
        back_populates="cart",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="CartItem.created_at"
    )
    coupon = relationship("Coupon", lazy="selectin")

    __table_args__ = (
        Index("idx_carts_user_status", "user_id", "status"),
    )

class CartItem(Base, TimestampedModel, UUIDModel):
    """Line item with a price snapshot taken when it was first added"""

    __tablename__ = "cart_items"

    cart_id = Column(Uuid, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Uuid, ForeignKey("products.id"), nullable=False)
    variant_id = Column(Uuid, ForeignKey("product_variants.id"), nullable=False)

    # Quantity and price
    quantity = Column(Integer, nullable=False, default=1)
    original_price = Column(Numeric(10, 2), nullable=False)
    sale_price = Column(Numeric(10, 2), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)

    # Product snapshot
    product_name = Column(String(255), nullable=False)
    product_image = Column(String(500), nullable=True)
    product_slug = Column(String(255), nullable=True)
    sku = Column(String(100), nullable=True)
    stock = Column(Integer, nullable=True)
    color = Column(String(50), nullable=True)
    size = Column(String(20), nullable=True)
    weight = Column(Numeric(10, 3), nullable=True)

    # Gift options
    customization = Column(JSON, nullable=True)
    is_gift = Column(Boolean, default=False, nullable=False)
    gift_message = Column(Text, nullable=True)

    cart = relationship("Cart", back_populates="items")

    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", "variant_id", name="uq_cart_product_variant"),
        CheckConstraint("quantity > 0", name="check_positive_cart_quantity"),
    )
