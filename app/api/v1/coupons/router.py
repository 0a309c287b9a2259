"""
Coupon API router
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import uuid

from app.core.database import get_db
from app.schemas.base import APIResponse, Page
from app.utils.pagination import PaginationParams, get_pagination_params
from app.api.v1.auth.dependencies import CurrentUser, get_current_user, require_admin
from .schemas import (
    CouponCreate,
    CouponUpdate,
    CouponApplyRequest,
    CouponResponse,
    PublicCouponResponse,
    CouponPreview
)
from .services import CouponService

router = APIRouter()

@router.get("", response_model=APIResponse[Page[CouponResponse]])
async def list_coupons(
    active: Optional[bool] = Query(None),
    expired: Optional[bool] = Query(None),
    pagination: PaginationParams = Depends(get_pagination_params),
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = CouponService(db)
    page = await service.list_coupons(pagination, active=active, expired=expired)
    page["items"] = [CouponResponse.model_validate(c) for c in page["items"]]
    return APIResponse(data=Page[CouponResponse](**page))

@router.get("/public", response_model=APIResponse[List[PublicCouponResponse]])
async def list_public_coupons(db: AsyncSession = Depends(get_db)):
    service = CouponService(db)
    coupons = await service.list_public()
    return APIResponse(data=[PublicCouponResponse.model_validate(c) for c in coupons])

@router.post("/validate", response_model=APIResponse[CouponPreview])
@router.post("/apply", response_model=APIResponse[CouponPreview])
async def preview_coupon(
    payload: CouponApplyRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Check a code against an order amount and show the resulting discount"""
    service = CouponService(db)
    preview = await service.preview(payload.code, payload.total_amount, current_user.user_id)
    return APIResponse(message="Coupon applied successfully!", data=CouponPreview(**preview))

@router.post("", response_model=APIResponse[CouponResponse], status_code=status.HTTP_201_CREATED)
async def create_coupon(
    payload: CouponCreate,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = CouponService(db)
    coupon = await service.create_coupon(payload)
    return APIResponse(message="Coupon created successfully!", data=CouponResponse.model_validate(coupon))

@router.get("/{coupon_id}", response_model=APIResponse[CouponResponse])
async def get_coupon(
    coupon_id: uuid.UUID,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = CouponService(db)
    coupon = await service.get_coupon(coupon_id)
    return APIResponse(data=CouponResponse.model_validate(coupon))

@router.put("/{coupon_id}", response_model=APIResponse[CouponResponse])
async def update_coupon(
    coupon_id: uuid.UUID,
    payload: CouponUpdate,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = CouponService(db)
    coupon = await service.update_coupon(coupon_id, payload)
    return APIResponse(message="Coupon updated successfully!", data=CouponResponse.model_validate(coupon))

@router.delete("/{coupon_id}", response_model=APIResponse[None])
async def delete_coupon(
    coupon_id: uuid.UUID,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = CouponService(db)
    await service.delete_coupon(coupon_id)
    return APIResponse(message="Coupon deleted successfully!")
