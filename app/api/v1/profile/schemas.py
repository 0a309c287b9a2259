"""
Profile schemas
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime
import uuid

from app.models import Gender, UserRole
from app.schemas.base import BaseSchema

class AddressInput(BaseModel):
    full_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    address_line_one: Optional[str] = Field(None, max_length=255)
    address_line_two: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, max_length=100)
    address_type: Optional[str] = Field(None, max_length=20)
    is_default: Optional[bool] = None

class ProfileUpdate(BaseModel):
    """
    Partial profile update

    Field rules are checked by the service so every problem is reported
    in one response.
    """
    name: Optional[str] = Field(None, max_length=100)
    username: Optional[str] = Field(None, max_length=50)
    avatar: Optional[str] = Field(None, max_length=500)
    gender: Optional[Gender] = None
    birth_date: Optional[date] = None
    address: Optional[AddressInput] = None

class AddressResponse(BaseSchema):
    id: uuid.UUID
    full_name: str
    phone: str
    address_line_one: str
    address_line_two: Optional[str] = None
    city: str
    zip_code: Optional[str] = None
    country: str
    address_type: str
    is_default: bool

class ProfileResponse(BaseSchema):
    id: uuid.UUID
    email: str
    name: str
    username: Optional[str] = None
    avatar: Optional[str] = None
    gender: Optional[Gender] = None
    birth_date: Optional[date] = None
    role: UserRole
    address: Optional[AddressResponse] = None
    created_at: datetime
