"""
Profile API router
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.schemas.base import APIResponse
from app.api.v1.auth.dependencies import CurrentUser, get_current_user
from .schemas import ProfileUpdate, ProfileResponse
from .services import ProfileService

router = APIRouter()

@router.get("", response_model=APIResponse[ProfileResponse])
async def get_profile(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = ProfileService(db)
    user = await service.get_profile(current_user.user_id)
    return APIResponse(data=ProfileResponse.model_validate(user))

@router.put("", response_model=APIResponse[ProfileResponse])
async def update_profile(
    payload: ProfileUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = ProfileService(db)
    user = await service.update_profile(current_user.user_id, payload)
    return APIResponse(message="Profile updated successfully", data=ProfileResponse.model_validate(user))
