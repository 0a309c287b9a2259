"""
Authentication API routes
"""

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import uuid

from app.core.database import get_db
from app.core.config import settings
from app.core.rate_limit import limiter
from app.core.exceptions import UnauthorizedException
from app.schemas.base import APIResponse, Page
from app.utils.pagination import PaginationParams, get_pagination_params
from .dependencies import CurrentUser, get_current_user, require_admin
from .schemas import (
    RegisterRequest,
    LoginRequest,
    RefreshTokenRequest,
    ChangePasswordRequest,
    ChangeRoleRequest,
    AuthResponse,
    UserResponse,
    TokenResponse
)
from .services import AuthService

router = APIRouter()

def set_auth_cookies(response: Response, tokens: TokenResponse) -> None:
    """Store the token pair in HTTP-only cookies"""
    response.set_cookie(
        settings.ACCESS_TOKEN_COOKIE,
        tokens.access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )
    response.set_cookie(
        settings.REFRESH_TOKEN_COOKIE,
        tokens.refresh_token,
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )

@router.post(
    "/register",
    response_model=APIResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register new user"
)
@limiter.limit(settings.RATE_LIMIT_AUTH)
async def register(
    request: Request,
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db)
):
    """Create a customer account"""
    service = AuthService(db)
    user = await service.register(payload)
    return APIResponse(
        message="User registered successfully",
        data=UserResponse.model_validate(user)
    )

@router.post(
    "/login",
    response_model=APIResponse[AuthResponse],
    summary="Login user",
    description="Login with email and password; tokens are also set as HTTP-only cookies"
)
@limiter.limit(settings.RATE_LIMIT_AUTH)
async def login(
    request: Request,
    response: Response,
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    service = AuthService(db)
    user = await service.login(payload.email, payload.password)
    tokens = service.generate_tokens(user)
    set_auth_cookies(response, tokens)

    return APIResponse(
        message="Login successful",
        data=AuthResponse(user=UserResponse.model_validate(user), tokens=tokens)
    )

@router.post(
    "/refresh-token",
    response_model=APIResponse[TokenResponse],
    summary="Refresh access token"
)
async def refresh_token(
    request: Request,
    response: Response,
    payload: Optional[RefreshTokenRequest] = None,
    db: AsyncSession = Depends(get_db)
):
    """Exchange the refresh token cookie (or body value) for a new pair"""
    token = request.cookies.get(settings.REFRESH_TOKEN_COOKIE)
    if not token and payload:
        token = payload.refresh_token
    if not token:
        raise UnauthorizedException("Refresh token is required")

    service = AuthService(db)
    _, tokens = await service.refresh_tokens(token)
    set_auth_cookies(response, tokens)

    return APIResponse(message="Token refreshed successfully", data=tokens)

@router.post("/logout", response_model=APIResponse[None], summary="Logout user")
async def logout(response: Response):
    """Clear the auth cookies"""
    response.delete_cookie(settings.ACCESS_TOKEN_COOKIE)
    response.delete_cookie(settings.REFRESH_TOKEN_COOKIE)
    return APIResponse(message="Logged out successfully")

@router.get("/me", response_model=APIResponse[UserResponse])
async def get_me(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = AuthService(db)
    user = await service.get_user(current_user.user_id)
    return APIResponse(data=UserResponse.model_validate(user))

@router.post("/change-password", response_model=APIResponse[None])
async def change_password(
    payload: ChangePasswordRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = AuthService(db)
    await service.change_password(current_user.user_id, payload.current_password, payload.new_password)
    return APIResponse(message="Password changed successfully")

# Admin user management

@router.get("/users", response_model=APIResponse[Page[UserResponse]])
async def list_users(
    pagination: PaginationParams = Depends(get_pagination_params),
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = AuthService(db)
    page = await service.list_users(pagination)
    page["items"] = [UserResponse.model_validate(user) for user in page["items"]]
    return APIResponse(data=Page[UserResponse](**page))

@router.get("/users/{user_id}", response_model=APIResponse[UserResponse])
async def get_user(
    user_id: uuid.UUID,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = AuthService(db)
    user = await service.get_user(user_id)
    return APIResponse(data=UserResponse.model_validate(user))

@router.put("/users/{user_id}/role", response_model=APIResponse[UserResponse])
async def change_user_role(
    user_id: uuid.UUID,
    payload: ChangeRoleRequest,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = AuthService(db)
    user = await service.change_role(user_id, payload.role)
    return APIResponse(message="User role updated successfully", data=UserResponse.model_validate(user))

@router.delete("/users/{user_id}", response_model=APIResponse[None])
async def delete_user(
    user_id: uuid.UUID,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = AuthService(db)
    await service.delete_user(user_id, admin.user_id)
    return APIResponse(message="User deleted successfully")
