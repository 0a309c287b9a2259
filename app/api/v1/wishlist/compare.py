"""
Compare list API router
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.core.database import get_db
from app.core.config import settings
from app.schemas.base import APIResponse
from app.api.v1.auth.dependencies import CurrentUser, get_current_user
from .schemas import ProductRef, SavedProductResponse, CompareListResponse, ComparisonMatrix
from .services import CompareService

router = APIRouter()

@router.post("", response_model=APIResponse[CompareListResponse], status_code=status.HTTP_201_CREATED)
async def add_to_compare(
    payload: ProductRef,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = CompareService(db)
    await service.add(current_user.user_id, payload.product_id)
    return APIResponse(
        message="Product added to compare list successfully",
        data=await _compare_list(service, current_user.user_id)
    )

@router.get("", response_model=APIResponse[CompareListResponse])
async def get_compare_list(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = CompareService(db)
    return APIResponse(data=await _compare_list(service, current_user.user_id))

@router.get("/comparison", response_model=APIResponse[ComparisonMatrix])
async def get_comparison(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = CompareService(db)
    matrix = await service.comparison(current_user.user_id)
    message = None if matrix["products"] else "No products in compare list"
    return APIResponse(message=message, data=ComparisonMatrix(**matrix))

@router.delete("/{product_id}", response_model=APIResponse[CompareListResponse])
async def remove_from_compare(
    product_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = CompareService(db)
    await service.remove(current_user.user_id, product_id)
    return APIResponse(
        message="Product removed from compare list successfully",
        data=await _compare_list(service, current_user.user_id)
    )

@router.delete("", response_model=APIResponse[CompareListResponse])
async def clear_compare_list(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = CompareService(db)
    await service.clear(current_user.user_id)
    return APIResponse(message="Compare list cleared successfully", data=CompareListResponse(
        items=[], total=0, max_limit=settings.MAX_COMPARE_PRODUCTS, remaining_slots=settings.MAX_COMPARE_PRODUCTS
    ))

async def _compare_list(service: CompareService, user_id: uuid.UUID) -> CompareListResponse:
    items = await service.list_items(user_id)
    return CompareListResponse(
        items=[SavedProductResponse.model_validate(item) for item in items],
        total=len(items),
        max_limit=settings.MAX_COMPARE_PRODUCTS,
        remaining_slots=service.remaining_slots(len(items))
    )
