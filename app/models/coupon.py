"""
Coupon and discount models
"""

from sqlalchemy import Column, String, Integer, Numeric, Boolean, Index, CheckConstraint, Text, DateTime, Enum
from decimal import Decimal
import enum

from .base import Base, TimestampedModel, UUIDModel, utcnow

class DiscountType(str, enum.Enum):
    PERCENTAGE = "PERCENTAGE"
    FIXED = "FIXED"

class Coupon(Base, TimestampedModel, UUIDModel):
    """Discount coupons and promo codes"""

    __tablename__ = "coupons"

    code = Column(String(50), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)

    # Discount details
    discount_type = Column(Enum(DiscountType), nullable=False)
    discount_value = Column(Numeric(10, 2), nullable=False)

    # Conditions
    min_order_value = Column(Numeric(10, 2), default=Decimal("0.00"), nullable=False)
    max_discount = Column(Numeric(10, 2), nullable=True)

    # Usage limits
    max_usage = Column(Integer, nullable=True)
    max_usage_per_user = Column(Integer, nullable=True)
    used_count = Column(Integer, default=0, nullable=False)

    # Validity
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)

    is_active = Column(Boolean, default=True, nullable=False)
    is_public = Column(Boolean, default=False, nullable=False)

    __table_args__ = (
        CheckConstraint("discount_value > 0", name="check_positive_discount"),
        CheckConstraint("max_usage IS NULL OR max_usage >= 0", name="check_non_negative_max_usage"),
        Index("idx_coupons_active_window", "is_active", "start_date", "end_date"),
    )

    @property
    def is_expired(self) -> bool:
        return utcnow() > self.end_date

    @property
    def is_exhausted(self) -> bool:
        return self.max_usage is not None and self.used_count >= self.max_usage

    @property
    def is_valid(self) -> bool:
        """Check if coupon is currently usable"""
        now = utcnow()

        if not self.is_active:
            return False

        if now < self.start_date or now > self.end_date:
            return False

        return not self.is_exhausted
