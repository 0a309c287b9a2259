"""Banner schemas"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
import uuid

from app.models import BannerType
from app.schemas.base import BaseSchema
from app.utils.validators import validate_min_length

class BannerCreate(BaseModel):
    title: str = Field(..., max_length=200)
    subtitle: Optional[str] = Field(None, max_length=500)
    image_url: str = Field(..., min_length=1, max_length=500)
    link_url: Optional[str] = Field(None, max_length=500)
    button_text: Optional[str] = Field(None, max_length=50)
    type: BannerType = BannerType.MAIN
    is_active: bool = True

    @field_validator("title")
    @classmethod
    def check_title(cls, v):
        return validate_min_length(v, 3, "Title must be at least 3 characters long")

class BannerUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=200)
    subtitle: Optional[str] = Field(None, max_length=500)
    image_url: Optional[str] = Field(None, min_length=1, max_length=500)
    link_url: Optional[str] = Field(None, max_length=500)
    button_text: Optional[str] = Field(None, max_length=50)
    type: Optional[BannerType] = None
    is_active: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def check_title(cls, v):
        return validate_min_length(v, 3, "Title must be at least 3 characters long")

class BannerResponse(BaseSchema):
    id: uuid.UUID
    title: str
    subtitle: Optional[str] = None
    image_url: str
    link_url: Optional[str] = None
    button_text: Optional[str] = None
    type: BannerType
    is_active: bool
    created_at: datetime
