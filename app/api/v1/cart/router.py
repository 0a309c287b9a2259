"""
Cart API router
All routes act on the authenticated user's ACTIVE cart
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.core.database import get_db
from app.schemas.base import APIResponse
from app.api.v1.auth.dependencies import CurrentUser, get_current_user
from .schemas import (
    CartItemCreate,
    CartItemUpdate,
    CartItemDetailsUpdate,
    CartSettingsUpdate,
    ApplyCouponRequest,
    CartItemResponse,
    CartResponse
)
from .services import CartService

router = APIRouter()

@router.post("", response_model=APIResponse[CartResponse])
async def add_to_cart(
    payload: CartItemCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Add a product variant to the cart, creating the cart if needed"""
    service = CartService(db)
    cart = await service.add_item(current_user.user_id, payload)
    return APIResponse(message="Product added to cart successfully.", data=CartResponse.model_validate(cart))

@router.get("", response_model=APIResponse[CartResponse])
async def get_cart(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = CartService(db)
    cart = await service.get_cart(current_user.user_id)
    if not cart:
        return APIResponse(message="Your cart is empty.", data=CartResponse())
    return APIResponse(data=CartResponse.model_validate(cart))

@router.delete("", response_model=APIResponse[CartResponse])
async def clear_cart(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = CartService(db)
    cart = await service.clear_cart(current_user.user_id)
    return APIResponse(message="Cart cleared successfully.", data=CartResponse.model_validate(cart))

@router.put("/items/{item_id}", response_model=APIResponse[CartResponse])
async def update_cart_item(
    item_id: uuid.UUID,
    payload: CartItemUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = CartService(db)
    cart = await service.update_item_quantity(current_user.user_id, item_id, payload.quantity)
    return APIResponse(message="Cart item updated successfully.", data=CartResponse.model_validate(cart))

@router.delete("/items/{item_id}", response_model=APIResponse[CartResponse])
async def remove_cart_item(
    item_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = CartService(db)
    cart = await service.remove_item(current_user.user_id, item_id)
    return APIResponse(message="Item removed from cart.", data=CartResponse.model_validate(cart))

@router.put("/items/{item_id}/details", response_model=APIResponse[CartItemResponse])
async def update_cart_item_details(
    item_id: uuid.UUID,
    payload: CartItemDetailsUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = CartService(db)
    item = await service.update_item_details(current_user.user_id, item_id, payload)
    return APIResponse(message="Cart item details updated successfully.", data=CartItemResponse.model_validate(item))

@router.put("/settings", response_model=APIResponse[CartResponse])
async def update_cart_settings(
    payload: CartSettingsUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = CartService(db)
    cart = await service.update_settings(current_user.user_id, payload)
    return APIResponse(message="Cart settings updated successfully.", data=CartResponse.model_validate(cart))

@router.post("/coupon", response_model=APIResponse[CartResponse])
async def apply_coupon(
    payload: ApplyCouponRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = CartService(db)
    cart = await service.apply_coupon(current_user.user_id, payload.coupon_code)
    return APIResponse(message="Coupon applied successfully.", data=CartResponse.model_validate(cart))

@router.delete("/coupon", response_model=APIResponse[CartResponse])
async def remove_coupon(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = CartService(db)
    cart = await service.remove_coupon(current_user.user_id)
    return APIResponse(message="Coupon removed successfully.", data=CartResponse.model_validate(cart))
