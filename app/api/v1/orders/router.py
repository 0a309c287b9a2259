"""
Order API routes
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import uuid

from app.core.database import get_db
from app.models.order import OrderStatus
from app.schemas.base import APIResponse, Page
from app.utils.pagination import PaginationParams, get_pagination_params
from app.api.v1.auth.dependencies import CurrentUser, get_current_user, require_admin
from .schemas import (
    OrderCreate,
    OrderCancelRequest,
    OrderStatusUpdate,
    OrderResponse,
    AdminOrderResponse,
    OrderTrackingResponse
)
from .services import OrderService

router = APIRouter()

def _render(order, current_user: CurrentUser):
    schema = AdminOrderResponse if current_user.is_admin else OrderResponse
    return schema.model_validate(order)

@router.post(
    "",
    response_model=APIResponse[OrderResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create order",
    description="Place an order from the active cart"
)
async def create_order(
    payload: OrderCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = OrderService(db)
    order = await service.create_order(current_user.user_id, payload)
    return APIResponse(message="Order created successfully", data=OrderResponse.model_validate(order))

@router.get("", response_model=APIResponse[Page[OrderResponse]], summary="List own orders")
async def list_orders(
    status: Optional[OrderStatus] = None,
    pagination: PaginationParams = Depends(get_pagination_params),
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = OrderService(db)
    page = await service.list_orders(pagination, user_id=current_user.user_id, status=status)
    page["items"] = [OrderResponse.model_validate(o) for o in page["items"]]
    return APIResponse(data=Page[OrderResponse](**page))

@router.get("/admin/all", response_model=APIResponse[Page[AdminOrderResponse]], summary="List all orders")
async def list_all_orders(
    status: Optional[OrderStatus] = None,
    pagination: PaginationParams = Depends(get_pagination_params),
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = OrderService(db)
    page = await service.list_orders(pagination, status=status)
    page["items"] = [AdminOrderResponse.model_validate(o) for o in page["items"]]
    return APIResponse(data=Page[AdminOrderResponse](**page))

@router.get("/track/{order_number}", response_model=APIResponse[OrderTrackingResponse])
async def track_order(order_number: str, db: AsyncSession = Depends(get_db)):
    """Public order status lookup by order number"""
    service = OrderService(db)
    order = await service.track_order(order_number)
    return APIResponse(data=OrderTrackingResponse.model_validate(order))

@router.get("/{order_id}", response_model=APIResponse[OrderResponse])
async def get_order(
    order_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = OrderService(db)
    order = await service.get_order(order_id, current_user)
    return APIResponse(data=_render(order, current_user))

@router.put("/{order_id}/cancel", response_model=APIResponse[OrderResponse])
async def cancel_order(
    order_id: uuid.UUID,
    payload: Optional[OrderCancelRequest] = None,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = OrderService(db)
    reason = payload.reason if payload else None
    order = await service.cancel_order(order_id, current_user, reason)
    return APIResponse(message="Order cancelled successfully", data=_render(order, current_user))

@router.put("/{order_id}/status", response_model=APIResponse[AdminOrderResponse])
async def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = OrderService(db)
    order = await service.update_status(order_id, payload, admin)
    return APIResponse(message="Order status updated successfully", data=AdminOrderResponse.model_validate(order))
