"""
Wishlist and compare list models
"""

from sqlalchemy import Column, ForeignKey, Index, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from .base import Base, TimestampedModel, UUIDModel

class WishlistItem(Base, TimestampedModel, UUIDModel):
    """Product saved by a user for later"""

    __tablename__ = "wishlist_items"

    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Uuid, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)

    product = relationship("Product", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_user_product_wishlist"),
        Index("idx_wishlist_user", "user_id"),
    )

class CompareItem(Base, TimestampedModel, UUIDModel):
    """Product placed on a user's side-by-side comparison list"""

    __tablename__ = "compare_items"

    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Uuid, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)

    product = relationship("Product", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_user_product_compare"),
        Index("idx_compare_user", "user_id"),
    )
