"""
Product type API router
Shares the lookup-table CRUD with categories
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import uuid

from app.core.database import get_db
from app.models import ProductType
from app.schemas.base import APIResponse
from app.api.v1.auth.dependencies import CurrentUser, require_admin
from app.api.v1.categories import crud
from app.api.v1.categories.schemas import ProductTypeCreate, ProductTypeUpdate, ProductTypeResponse

router = APIRouter()

@router.get("", response_model=APIResponse[List[ProductTypeResponse]])
async def list_product_types(db: AsyncSession = Depends(get_db)):
    product_types = await crud.get_all(db, ProductType)
    return APIResponse(data=[ProductTypeResponse.model_validate(t) for t in product_types])

@router.get("/{type_id}", response_model=APIResponse[ProductTypeResponse])
async def get_product_type(type_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    product_type = await crud.get_by_id(db, ProductType, type_id)
    return APIResponse(data=ProductTypeResponse.model_validate(product_type))

@router.post("", response_model=APIResponse[ProductTypeResponse], status_code=status.HTTP_201_CREATED)
async def create_product_type(
    payload: ProductTypeCreate,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    product_type = await crud.create(db, ProductType, payload)
    return APIResponse(message="Product type created successfully", data=ProductTypeResponse.model_validate(product_type))

@router.put("/{type_id}", response_model=APIResponse[ProductTypeResponse])
async def update_product_type(
    type_id: uuid.UUID,
    payload: ProductTypeUpdate,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    product_type = await crud.update(db, ProductType, type_id, payload)
    return APIResponse(message="Product type updated successfully", data=ProductTypeResponse.model_validate(product_type))

@router.delete("/{type_id}", response_model=APIResponse[None])
async def delete_product_type(
    type_id: uuid.UUID,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    await crud.delete(db, ProductType, type_id)
    return APIResponse(message="Product type deleted successfully")
