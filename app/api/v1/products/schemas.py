"""
Product schemas for request/response validation
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List, Literal
from datetime import datetime
from decimal import Decimal
import uuid

from app.models import ProductGender
from app.schemas.base import BaseSchema, Money

class VariantInput(BaseModel):
    """One color/size combination submitted with a product"""
    color_name: Optional[str] = Field(None, max_length=50)
    color: Optional[str] = Field(None, max_length=50)
    color_code: Optional[str] = Field(None, max_length=20)
    size: Optional[str] = Field(None, max_length=20)
    quantity: int = Field(0, ge=0)
    image: Optional[str] = Field(None, max_length=500)

    @model_validator(mode="after")
    def check_identifies_variant(self):
        if not (self.color or self.color_name or self.size):
            raise ValueError("Variant needs a color or a size")
        return self

class ProductBase(BaseModel):
    description: Optional[str] = None
    about: List[str] = Field(default_factory=list)
    brand: Optional[str] = Field(None, max_length=100)
    gender: Optional[ProductGender] = None
    category_id: Optional[uuid.UUID] = None
    type_id: Optional[uuid.UUID] = None
    origin_price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    thumb_image: Optional[str] = Field(None, max_length=500)
    images: List[str] = Field(default_factory=list)
    sizes: List[str] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    weight: Optional[Decimal] = Field(None, ge=0)
    is_new: bool = False
    is_sale: bool = False
    is_flash_sale: bool = False
    is_featured: bool = False
    is_active: bool = True

class ProductCreate(ProductBase):
    """Product with its full variant list"""
    name: str = Field(..., min_length=2, max_length=255)
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    variants: List[VariantInput] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Product name is required")
        return v

class ProductUpdate(BaseModel):
    """Partial update; a given variant list replaces the existing one"""
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    description: Optional[str] = None
    about: Optional[List[str]] = None
    brand: Optional[str] = Field(None, max_length=100)
    gender: Optional[ProductGender] = None
    category_id: Optional[uuid.UUID] = None
    type_id: Optional[uuid.UUID] = None
    price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    origin_price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    thumb_image: Optional[str] = Field(None, max_length=500)
    images: Optional[List[str]] = None
    sizes: Optional[List[str]] = None
    colors: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    weight: Optional[Decimal] = Field(None, ge=0)
    is_new: Optional[bool] = None
    is_sale: Optional[bool] = None
    is_flash_sale: Optional[bool] = None
    is_featured: Optional[bool] = None
    is_active: Optional[bool] = None
    variants: Optional[List[VariantInput]] = None

class ProductStatusUpdate(BaseModel):
    """Flag toggles; at least one must be given"""
    is_new: Optional[bool] = None
    is_sale: Optional[bool] = None
    is_flash_sale: Optional[bool] = None
    is_featured: Optional[bool] = None
    is_active: Optional[bool] = None

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def check_not_empty(self):
        if not self.model_fields_set:
            raise ValueError("No status updates provided")
        return self

class VariantsReplace(BaseModel):
    variants: List[VariantInput] = Field(..., min_length=1)

class InventoryUpdate(BaseModel):
    """Set or adjust the stock of one variant"""
    variant_id: uuid.UUID
    quantity: int
    mode: Literal["set", "adjust"] = "set"

    @model_validator(mode="after")
    def check_quantity(self):
        if self.mode == "set" and self.quantity < 0:
            raise ValueError("Stock cannot be negative")
        return self

class ProductListParams(BaseModel):
    """Catalog filters and ordering"""
    category_id: Optional[uuid.UUID] = None
    type_id: Optional[uuid.UUID] = None
    gender: Optional[ProductGender] = None
    brand: Optional[str] = None
    is_new: Optional[bool] = None
    is_sale: Optional[bool] = None
    is_flash_sale: Optional[bool] = None
    min_price: Optional[Decimal] = Field(None, ge=0)
    max_price: Optional[Decimal] = Field(None, ge=0)
    sort_by: Literal["created_at", "price", "name", "sold"] = "created_at"

class VariantResponse(BaseSchema):
    id: uuid.UUID
    product_id: uuid.UUID
    color_name: Optional[str] = None
    color: Optional[str] = None
    color_code: Optional[str] = None
    size: Optional[str] = None
    quantity: int
    image: Optional[str] = None

class LookupSummary(BaseSchema):
    id: uuid.UUID
    name: str
    slug: str

class ProductResponse(BaseSchema):
    """Product with variants and lookups"""
    id: uuid.UUID
    name: str
    slug: str
    description: Optional[str] = None
    about: List[str] = Field(default_factory=list)
    brand: Optional[str] = None
    gender: Optional[ProductGender] = None
    price: Money
    origin_price: Optional[Money] = None
    thumb_image: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    sizes: List[str] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    is_new: bool
    is_sale: bool
    is_flash_sale: bool
    is_featured: bool
    is_active: bool
    sold: int
    view_count: int
    total_stock: int
    category: Optional[LookupSummary] = None
    product_type: Optional[LookupSummary] = None
    variants: List[VariantResponse] = Field(default_factory=list)
    created_at: datetime

    @field_validator("about", "images", "sizes", "colors", "tags", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return v or []
