"""Product and variant models"""

from sqlalchemy import Column, String, Text, Numeric, Integer, Boolean, JSON, ForeignKey, Index, CheckConstraint, Enum, Uuid
from sqlalchemy.orm import relationship
import enum

from .base import Base, TimestampedModel, UUIDModel, SluggedModel

class ProductGender(str, enum.Enum):
    MEN = "MEN"
    WOMEN = "WOMEN"
    UNISEX = "UNISEX"
    KIDS = "KIDS"

class Product(Base, TimestampedModel, UUIDModel, SluggedModel):
    """Catalog product; sellable stock lives on its variants"""

    __tablename__ = "products"

    # Basic info
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    about = Column(JSON, default=list)
    brand = Column(String(100), nullable=True, index=True)
    gender = Column(Enum(ProductGender), nullable=True)

    # Categorization
    category_id = Column(Uuid, ForeignKey("categories.id"), nullable=True)
    type_id = Column(Uuid, ForeignKey("product_types.id"), nullable=True)
    tags = Column(JSON, default=list)

    # Pricing
    price = Column(Numeric(10, 2), nullable=False, index=True)
    origin_price = Column(Numeric(10, 2), nullable=True)

    # Media
    thumb_image = Column(String(500), nullable=True)
    images = Column(JSON, default=list)

    # Attributes
    sizes = Column(JSON, default=list)
    colors = Column(JSON, default=list)
    weight = Column(Numeric(10, 3), nullable=True)

    # Flags
    is_new = Column(Boolean, default=False, nullable=False)
    is_sale = Column(Boolean, default=False, nullable=False)
    is_flash_sale = Column(Boolean, default=False, nullable=False)
    is_featured = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    # Stats
    sold = Column(Integer, default=0, nullable=False)
    view_count = Column(Integer, default=0, nullable=False)

    # Relationships
    category = relationship("Category", back_populates="products", lazy="selectin")
    product_type = relationship("ProductType", back_populates="products", lazy="selectin")
    variants = relationship(
        "ProductVariant",
        back_populates="product",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ProductVariant.created_at"
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="check_product_price_non_negative"),
        Index("idx_products_category_active", "category_id", "is_active"),
    )

    @property
    def total_stock(self) -> int:
        return sum(variant.quantity for variant in self.variants)

    def __repr__(self):
        return f"<Product {self.name}>"

class ProductVariant(Base, TimestampedModel, UUIDModel):
    """Color/size combination carrying its own stock count"""

    __tablename__ = "product_variants"

    product_id = Column(Uuid, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)

    color_name = Column(String(50), nullable=True)
    color = Column(String(50), nullable=True)
    color_code = Column(String(20), nullable=True)
    size = Column(String(20), nullable=True)
    quantity = Column(Integer, default=0, nullable=False)
    image = Column(String(500), nullable=True)

    product = relationship("Product", back_populates="variants")

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="check_variant_stock_non_negative"),
    )

    @property
    def sku(self) -> str:
        return f"{self.product_id}-{self.id}"
