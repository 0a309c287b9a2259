"""
Authentication dependencies
"""

from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel
import uuid

from app.core.config import settings
from app.core.security import SecurityUtils
from app.core.exceptions import UnauthorizedException, ForbiddenException
from app.models import UserRole

# Bearer header is accepted for API clients that cannot hold cookies
security = HTTPBearer(auto_error=False)

class CurrentUser(BaseModel):
    """Identity decoded from the access token"""

    user_id: uuid.UUID
    email: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

def _extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    token = request.cookies.get(settings.ACCESS_TOKEN_COOKIE)
    if token:
        return token
    if credentials:
        return credentials.credentials
    return None

async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> CurrentUser:
    """
    Get current authenticated user (required)
    Raises 401 if the token is missing, invalid or not an access token
    """
    token = _extract_token(request, credentials)
    if not token:
        raise UnauthorizedException("User not authenticated")

    payload = SecurityUtils.decode_token(token)
    if payload.get("type") != "access":
        raise UnauthorizedException("Invalid token type")

    try:
        return CurrentUser(
            user_id=payload["sub"],
            email=payload["email"],
            role=payload["role"],
        )
    except (KeyError, ValueError):
        raise UnauthorizedException("Invalid authentication credentials")

async def require_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Allow only administrators"""
    if not current_user.is_admin:
        raise ForbiddenException("Access denied. Admin only.")
    return current_user
