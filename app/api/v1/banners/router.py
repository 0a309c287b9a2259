"""
Banner API router
Listing is public; changes are admin only
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import uuid

from app.core.database import get_db
from app.schemas.base import APIResponse
from app.api.v1.auth.dependencies import CurrentUser, require_admin
from . import crud
from .schemas import BannerCreate, BannerUpdate, BannerResponse

router = APIRouter()

@router.get("", response_model=APIResponse[List[BannerResponse]])
async def list_banners(
    active_only: bool = Query(False),
    db: AsyncSession = Depends(get_db)
):
    banners = await crud.get_all(db, active_only=active_only)
    return APIResponse(data=[BannerResponse.model_validate(b) for b in banners])

@router.post("", response_model=APIResponse[BannerResponse], status_code=status.HTTP_201_CREATED)
async def create_banner(
    payload: BannerCreate,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    banner = await crud.create(db, payload)
    return APIResponse(message="Banner created successfully", data=BannerResponse.model_validate(banner))

@router.put("/{banner_id}", response_model=APIResponse[BannerResponse])
async def update_banner(
    banner_id: uuid.UUID,
    payload: BannerUpdate,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    banner = await crud.update(db, banner_id, payload)
    return APIResponse(message="Banner updated successfully", data=BannerResponse.model_validate(banner))

@router.delete("/{banner_id}", response_model=APIResponse[None])
async def delete_banner(
    banner_id: uuid.UUID,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    await crud.delete(db, banner_id)
    return APIResponse(message="Banner deleted successfully")
