"""
Category and product type models
Both are flat lookup tables referenced by products
"""

from sqlalchemy import Column, String, Text, Boolean
from sqlalchemy.orm import relationship

from .base import Base, TimestampedModel, UUIDModel, SluggedModel

class Category(Base, TimestampedModel, UUIDModel, SluggedModel):
    """Product category"""

    __tablename__ = "categories"

    name = Column(String(100), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    products = relationship("Product", back_populates="category")

    def __repr__(self):
        return f"<Category {self.name}>"

class ProductType(Base, TimestampedModel, UUIDModel, SluggedModel):
    """Product type, e.g. shirt or sneaker"""

    __tablename__ = "product_types"

    name = Column(String(100), nullable=False, unique=True)
    description = Column(Text, nullable=True)

    products = relationship("Product", back_populates="product_type")

    def __repr__(self):
        return f"<ProductType {self.name}>"
