"""Order models"""

from sqlalchemy import Column, String, Numeric, Integer, Enum, ForeignKey, Index, Text, DateTime, JSON, Uuid
from sqlalchemy.orm import relationship
import enum

from .base import Base, TimestampedModel, UUIDModel

class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"

class Order(Base, TimestampedModel, UUIDModel):
    """Order placed from a user's cart"""

    __tablename__ = "orders"

    order_number = Column(String(50), unique=True, nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False)

    # Status
    status = Column(Enum(OrderStatus), default=OrderStatus.PENDING, nullable=False, index=True)
    payment_status = Column(Enum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False)

    # Amounts copied from the cart
    items_price = Column(Numeric(10, 2), nullable=False)
    tax_price = Column(Numeric(10, 2), default=0, nullable=False)
    shipping_price = Column(Numeric(10, 2), default=0, nullable=False)
    discount_amount = Column(Numeric(10, 2), default=0, nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), default="USD", nullable=False)
    coupon_id = Column(Uuid, ForeignKey("coupons.id", ondelete="SET NULL"), nullable=True)

    # Payment and delivery
    payment_method = Column(String(50), nullable=False)
    shipping_method = Column(String(50), nullable=True)
    shipping_address = Column(JSON, nullable=False)
    delivered_at = Column(DateTime, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)

    notes = Column(Text, nullable=True)
    admin_notes = Column(Text, nullable=True)
    cancellation_reason = Column(String(500), nullable=True)

    # Relationships
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin"
    )
    status_history = relationship(
        "OrderStatusHistory",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderStatusHistory.created_at"
    )

    __table_args__ = (
        Index("idx_orders_user_status", "user_id", "status"),
        Index("idx_orders_created_status", "created_at", "status"),
    )

class OrderItem(Base, TimestampedModel, UUIDModel):
    """Individual items within an order"""

    __tablename__ = "order_items"

    order_id = Column(Uuid, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Uuid, ForeignKey("products.id"), nullable=False)
    variant_id = Column(Uuid, ForeignKey("product_variants.id"), nullable=True)

    # Item details (snapshot at time of order)
    product_name = Column(String(255), nullable=False)
    image = Column(String(500), nullable=True)
    sku = Column(String(100), nullable=True)
    color = Column(String(50), nullable=True)
    size = Column(String(20), nullable=True)

    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)

    order = relationship("Order", back_populates="items")

    __table_args__ = (
        Index("idx_order_items_order_product", "order_id", "product_id"),
    )

class OrderStatusHistory(Base, TimestampedModel, UUIDModel):
    """Track order status changes"""

    __tablename__ = "order_status_history"

    order_id = Column(Uuid, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    status = Column(Enum(OrderStatus), nullable=False)
    previous_status = Column(Enum(OrderStatus), nullable=True)
    reason = Column(String(500), nullable=True)
    changed_by = Column(Uuid, ForeignKey("users.id"), nullable=True)

    order = relationship("Order", back_populates="status_history")

    __table_args__ = (
        Index("idx_order_status_history_order", "order_id"),
    )
