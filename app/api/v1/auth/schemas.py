"""
Authentication schemas for request/response validation
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime, date
import uuid

from app.core.security import SecurityUtils
from app.models import UserRole, Gender
from app.schemas.base import BaseSchema

def validate_password_strength(v: str) -> str:
    is_valid, message = SecurityUtils.validate_password(v)
    if not is_valid:
        raise ValueError(message)
    return v

class RegisterRequest(BaseModel):
    """Request to create an account"""
    email: EmailStr
    password: str = Field(..., max_length=128)
    name: str = Field(..., min_length=2, max_length=100)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower()

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        return validate_password_strength(v)

    model_config = {
        "json_schema_extra": {
            "example": {
                "email": "jane@example.com",
                "password": "secret123",
                "name": "Jane Doe"
            }
        }
    }

class LoginRequest(BaseModel):
    """Request to login with email and password"""
    email: EmailStr
    password: str

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower()

class RefreshTokenRequest(BaseModel):
    """Refresh token for clients not using cookies"""
    refresh_token: Optional[str] = None

class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., max_length=128)

    @field_validator('new_password')
    @classmethod
    def validate_password(cls, v):
        return validate_password_strength(v)

class ChangeRoleRequest(BaseModel):
    role: UserRole

class TokenResponse(BaseModel):
    """Token pair"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int

class UserResponse(BaseSchema):
    """User information response"""
    id: uuid.UUID
    email: str
    name: str
    username: Optional[str] = None
    role: UserRole
    avatar: Optional[str] = None
    gender: Optional[Gender] = None
    birth_date: Optional[date] = None
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime

class AuthResponse(BaseModel):
    """Login response"""
    user: UserResponse
    tokens: TokenResponse
