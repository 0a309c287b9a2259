"""
Category API router
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import uuid

from app.core.database import get_db
from app.models import Category
from app.schemas.base import APIResponse
from app.api.v1.auth.dependencies import CurrentUser, require_admin
from . import crud
from .schemas import CategoryCreate, CategoryUpdate, CategoryResponse

router = APIRouter()

@router.get("", response_model=APIResponse[List[CategoryResponse]])
async def list_categories(
    active_only: bool = Query(False),
    db: AsyncSession = Depends(get_db)
):
    categories = await crud.get_all(db, Category, active_only=active_only)
    return APIResponse(data=[CategoryResponse.model_validate(c) for c in categories])

@router.get("/{category_id}", response_model=APIResponse[CategoryResponse])
async def get_category(category_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    category = await crud.get_by_id(db, Category, category_id)
    return APIResponse(data=CategoryResponse.model_validate(category))

@router.post("", response_model=APIResponse[CategoryResponse], status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: CategoryCreate,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    category = await crud.create(db, Category, payload)
    return APIResponse(message="Category created successfully", data=CategoryResponse.model_validate(category))

@router.put("/{category_id}", response_model=APIResponse[CategoryResponse])
async def update_category(
    category_id: uuid.UUID,
    payload: CategoryUpdate,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    category = await crud.update(db, Category, category_id, payload)
    return APIResponse(message="Category updated successfully", data=CategoryResponse.model_validate(category))

@router.delete("/{category_id}", response_model=APIResponse[None])
async def delete_category(
    category_id: uuid.UUID,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    await crud.delete(db, Category, category_id)
    return APIResponse(message="Category deleted successfully")
