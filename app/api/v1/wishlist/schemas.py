"""
Wishlist and compare list schemas
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
import uuid

from app.schemas.base import BaseSchema, Money
from app.api.v1.products.schemas import ProductResponse

class ProductRef(BaseModel):
    product_id: uuid.UUID

class SavedProductResponse(BaseSchema):
    """Wishlist or compare entry with its product"""
    id: uuid.UUID
    product_id: uuid.UUID
    product: ProductResponse
    created_at: datetime

class WishlistResponse(BaseModel):
    items: List[SavedProductResponse]
    total: int

class WishlistCheck(BaseModel):
    product_id: uuid.UUID
    in_wishlist: bool

class CompareListResponse(BaseModel):
    items: List[SavedProductResponse]
    total: int
    max_limit: int
    remaining_slots: int

class ComparedProduct(BaseModel):
    """One column of the comparison matrix"""
    id: uuid.UUID
    name: str
    slug: str
    price: Money
    origin_price: Optional[Money] = None
    brand: Optional[str] = None
    category: Optional[str] = None
    is_new: bool
    is_sale: bool
    is_flash_sale: bool
    thumb_image: Optional[str] = None
    sizes: List[str] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list)
    weight: Optional[float] = None
    total_stock: int

class PriceRange(BaseModel):
    min: Money
    max: Money

class ComparisonMatrix(BaseModel):
    products: List[ComparedProduct] = Field(default_factory=list)
    sizes: List[str] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list)
    price_range: Optional[PriceRange] = None
    comparison_fields: List[str] = Field(default_factory=list)
    total: int = 0
    max_limit: int
