"""
Wishlist API router
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.core.database import get_db
from app.schemas.base import APIResponse
from app.api.v1.auth.dependencies import CurrentUser, get_current_user
from .schemas import ProductRef, SavedProductResponse, WishlistResponse, WishlistCheck
from .services import WishlistService

router = APIRouter()

@router.post("", response_model=APIResponse[SavedProductResponse], status_code=status.HTTP_201_CREATED)
async def add_to_wishlist(
    payload: ProductRef,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = WishlistService(db)
    item = await service.add(current_user.user_id, payload.product_id)
    return APIResponse(
        message="Product added to wishlist successfully",
        data=SavedProductResponse.model_validate(item)
    )

@router.get("", response_model=APIResponse[WishlistResponse])
async def get_wishlist(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Wishlist entries, newest first"""
    service = WishlistService(db)
    items = await service.list_items(current_user.user_id)
    return APIResponse(data=WishlistResponse(
        items=[SavedProductResponse.model_validate(item) for item in items],
        total=len(items)
    ))

@router.get("/check/{product_id}", response_model=APIResponse[WishlistCheck])
async def check_wishlist(
    product_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = WishlistService(db)
    in_wishlist = await service.contains(current_user.user_id, product_id)
    return APIResponse(data=WishlistCheck(product_id=product_id, in_wishlist=in_wishlist))

@router.delete("/{product_id}", response_model=APIResponse[None])
async def remove_from_wishlist(
    product_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = WishlistService(db)
    await service.remove(current_user.user_id, product_id)
    return APIResponse(message="Product removed from wishlist successfully")

@router.delete("", response_model=APIResponse[dict])
async def clear_wishlist(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = WishlistService(db)
    removed = await service.clear(current_user.user_id)
    return APIResponse(message="Wishlist cleared successfully", data={"removed": removed})
