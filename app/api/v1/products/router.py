"""
Product API routes
"""

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from decimal import Decimal
import uuid

from app.core.database import get_db
from app.core.config import settings
from app.core.rate_limit import limiter
from app.models import ProductGender
from app.schemas.base import APIResponse, Page
from app.utils.pagination import PaginationParams, get_pagination_params
from app.api.v1.auth.dependencies import CurrentUser, require_admin
from .schemas import (
    ProductCreate,
    ProductUpdate,
    ProductStatusUpdate,
    ProductListParams,
    ProductResponse,
    VariantResponse,
    VariantsReplace,
    InventoryUpdate
)
from .services import ProductService

router = APIRouter()

def get_list_params(
    category_id: Optional[uuid.UUID] = None,
    type_id: Optional[uuid.UUID] = None,
    gender: Optional[ProductGender] = None,
    brand: Optional[str] = None,
    is_new: Optional[bool] = None,
    is_sale: Optional[bool] = None,
    is_flash_sale: Optional[bool] = None,
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    sort_by: str = Query("created_at", pattern="^(created_at|price|name|sold)$")
) -> ProductListParams:
    return ProductListParams(
        category_id=category_id,
        type_id=type_id,
        gender=gender,
        brand=brand,
        is_new=is_new,
        is_sale=is_sale,
        is_flash_sale=is_flash_sale,
        min_price=min_price,
        max_price=max_price,
        sort_by=sort_by,
    )

def _page(page: dict) -> Page[ProductResponse]:
    page["items"] = [ProductResponse.model_validate(product) for product in page["items"]]
    return Page[ProductResponse](**page)

@router.get("", response_model=APIResponse[Page[ProductResponse]], summary="List products")
async def list_products(
    filters: ProductListParams = Depends(get_list_params),
    pagination: PaginationParams = Depends(get_pagination_params),
    db: AsyncSession = Depends(get_db)
):
    """Active products filtered by catalog attributes, sorted descending"""
    service = ProductService(db)
    page = await service.list_products(filters, pagination)
    return APIResponse(data=_page(page))

@router.get("/search", response_model=APIResponse[Page[ProductResponse]])
@limiter.limit(settings.RATE_LIMIT_SEARCH)
async def search_products(
    request: Request,
    q: str = Query(..., min_length=1, max_length=100),
    pagination: PaginationParams = Depends(get_pagination_params),
    db: AsyncSession = Depends(get_db)
):
    service = ProductService(db)
    page = await service.search_products(q, pagination)
    return APIResponse(data=_page(page))

@router.get("/featured", response_model=APIResponse[List[ProductResponse]])
async def featured_products(
    limit: int = Query(10, ge=1, le=50),
    db: AsyncSession = Depends(get_db)
):
    service = ProductService(db)
    products = await service.get_featured(limit)
    return APIResponse(data=[ProductResponse.model_validate(p) for p in products])

@router.get("/admin/all", response_model=APIResponse[Page[ProductResponse]])
async def list_all_products(
    filters: ProductListParams = Depends(get_list_params),
    pagination: PaginationParams = Depends(get_pagination_params),
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Admin listing including inactive products"""
    service = ProductService(db)
    page = await service.list_products(filters, pagination, include_inactive=True)
    return APIResponse(data=_page(page))

@router.get("/{identifier}", response_model=APIResponse[ProductResponse])
async def get_product(identifier: str, db: AsyncSession = Depends(get_db)):
    """Get a product by id or slug"""
    service = ProductService(db)
    product = await service.get_product_by_id_or_slug(identifier)
    return APIResponse(data=ProductResponse.model_validate(product))

@router.get("/{product_id}/variants", response_model=APIResponse[List[VariantResponse]])
async def get_product_variants(product_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    service = ProductService(db)
    product = await service.get_product(product_id)
    return APIResponse(data=[VariantResponse.model_validate(v) for v in product.variants])

@router.post("/{product_id}/views", response_model=APIResponse[dict])
async def increment_views(product_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    service = ProductService(db)
    views = await service.increment_views(product_id)
    return APIResponse(message="Product view incremented successfully", data={"view_count": views})

@router.post("", response_model=APIResponse[ProductResponse], status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductCreate,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = ProductService(db)
    product = await service.create_product(payload)
    return APIResponse(message="Product created successfully", data=ProductResponse.model_validate(product))

@router.put("/{product_id}", response_model=APIResponse[ProductResponse])
async def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = ProductService(db)
    product = await service.update_product(product_id, payload)
    return APIResponse(message="Product updated successfully", data=ProductResponse.model_validate(product))

@router.put("/{product_id}/variants", response_model=APIResponse[ProductResponse])
async def replace_variants(
    product_id: uuid.UUID,
    payload: VariantsReplace,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = ProductService(db)
    product = await service.replace_variants(product_id, payload.variants)
    return APIResponse(message="Product variants updated successfully", data=ProductResponse.model_validate(product))

@router.put("/{product_id}/status", response_model=APIResponse[ProductResponse])
async def update_product_status(
    product_id: uuid.UUID,
    payload: ProductStatusUpdate,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = ProductService(db)
    product = await service.update_status(product_id, payload)
    return APIResponse(message="Product status updated successfully", data=ProductResponse.model_validate(product))

@router.post("/{product_id}/inventory", response_model=APIResponse[VariantResponse])
async def update_inventory(
    product_id: uuid.UUID,
    payload: InventoryUpdate,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = ProductService(db)
    variant = await service.update_inventory(product_id, payload)
    return APIResponse(message="Inventory updated successfully", data=VariantResponse.model_validate(variant))

@router.delete("/{product_id}", response_model=APIResponse[None])
async def delete_product(
    product_id: uuid.UUID,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = ProductService(db)
    await service.delete_product(product_id)
    return APIResponse(message="Product deleted successfully")
