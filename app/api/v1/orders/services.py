"""
Order service layer
Handles order placement from the cart and the order lifecycle
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import uuid
import logging

from app.models import (
    Order, OrderItem, OrderStatus, OrderStatusHistory, PaymentStatus,
    Product, ProductVariant, Coupon, Address
)
from app.models.base import utcnow, to_money
from app.core.exceptions import (
    NotFoundException,
    BadRequestException,
    ForbiddenException,
    OrderNotCancellableException
)
from app.utils.helpers import generate_order_number
from app.utils.pagination import paginate, PaginationParams
from app.api.v1.auth.dependencies import CurrentUser
from app.api.v1.cart.services import CartService
from app.api.v1.cart.totals import ZERO, CartTotals
from .schemas import OrderCreate, OrderStatusUpdate
from .state_machine import OrderStateMachine

logger = logging.getLogger(__name__)

class OrderService:
    """Order service for business logic"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.cart_service = CartService(db)
        self.state_machine = OrderStateMachine()

    async def _load(self, order_id: uuid.UUID, refresh: bool = False) -> Order:
        query = select(Order).where(Order.id == order_id)
        if refresh:
            query = query.execution_options(populate_existing=True)
        result = await self.db.execute(query)
        order = result.scalar_one_or_none()
        if not order:
            raise NotFoundException("Order not found")
        return order

    async def _resolve_shipping_address(self, user_id: uuid.UUID, data: OrderCreate, cart) -> dict:
        if data.shipping_address is not None:
            return data.shipping_address.model_dump()
        if cart.shipping_address:
            return cart.shipping_address

        result = await self.db.execute(select(Address).where(Address.user_id == user_id))
        address = result.scalar_one_or_none()
        if not address:
            raise BadRequestException("Shipping address is required")
        return address.as_shipping_address()

    def _record_status(
        self,
        order: Order,
        status: OrderStatus,
        previous: Optional[OrderStatus] = None,
        reason: Optional[str] = None,
        changed_by: Optional[uuid.UUID] = None
    ) -> None:
        order.status_history.append(OrderStatusHistory(
            status=status,
            previous_status=previous,
            reason=reason,
            changed_by=changed_by
        ))

    async def create_order(self, user_id: uuid.UUID, data: OrderCreate) -> Order:
        """
        Turn the user's active cart into an order

        The cart totals are recomputed first so an applied coupon that no
        longer qualifies is dropped before the amounts are copied. Stock
        was held when the items entered the cart and moves to the order
        as is. The cart is emptied in place.

        Args:
            user_id: Buyer
            data: Payment method, optional shipping address and notes

        Returns:
            Created order

        Raises:
            BadRequestException: If the cart is empty or no address is known
        """
        try:
            cart = await self.cart_service.get_cart(user_id, for_update=True)
            if not cart or not cart.items:
                raise BadRequestException("Cart is empty or not found")

            shipping_address = await self._resolve_shipping_address(user_id, data, cart)

            await self.cart_service.recalculate(cart, user_id)
            coupon = cart.coupon

            order = Order(
                order_number=generate_order_number(),
                user_id=user_id,
                status=OrderStatus.PENDING,
                payment_status=PaymentStatus.PENDING,
                items_price=cart.subtotal,
                tax_price=cart.tax_amount,
                shipping_price=cart.shipping_amount,
                discount_amount=cart.discount_amount,
                total_amount=max(ZERO, to_money(cart.total)),
                currency=cart.currency,
                coupon_id=coupon.id if coupon else None,
                payment_method=data.payment_method,
                shipping_method=cart.shipping_method,
                shipping_address=shipping_address,
                notes=data.notes if data.notes is not None else cart.notes,
                items=[],
                status_history=[],
            )

            for cart_item in cart.items:
                order.items.append(OrderItem(
                    product_id=cart_item.product_id,
                    variant_id=cart_item.variant_id,
                    product_name=cart_item.product_name,
                    image=cart_item.product_image,
                    sku=cart_item.sku,
                    color=cart_item.color,
                    size=cart_item.size,
                    quantity=cart_item.quantity,
                    price=cart_item.price,
                    total_price=cart_item.total_price,
                ))

                product = await self.db.get(Product, cart_item.product_id, with_for_update=True)
                if product:
                    product.sold = (product.sold or 0) + cart_item.quantity

            if coupon:
                coupon.used_count = (coupon.used_count or 0) + 1

            self._record_status(order, OrderStatus.PENDING, changed_by=user_id)
            self.db.add(order)

            cart.items.clear()
            cart.coupon = None
            cart.notes = None
            cart.shipping_address = None
            self.cart_service.store_totals(cart, CartTotals.empty(), ZERO)

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Order placed: {order.order_number} by user {user_id}, total {order.total_amount}")
        return await self._load(order.id, refresh=True)

    async def get_order(self, order_id: uuid.UUID, current_user: CurrentUser) -> Order:
        """
        Get an order visible to ``current_user``

        Raises:
            NotFoundException: If the order does not exist
            ForbiddenException: If it belongs to someone else
        """
        order = await self._load(order_id)
        if order.user_id != current_user.user_id and not current_user.is_admin:
            raise ForbiddenException("Access denied")
        return order

    async def list_orders(
        self,
        pagination: PaginationParams,
        user_id: Optional[uuid.UUID] = None,
        status: Optional[OrderStatus] = None
    ) -> dict:
        """Orders newest first, limited to one user unless ``user_id`` is None"""
        query = select(Order)
        if user_id is not None:
            query = query.where(Order.user_id == user_id)
        if status is not None:
            query = query.where(Order.status == status)
        query = query.order_by(Order.created_at.desc())
        return await paginate(self.db, query, pagination)

    async def track_order(self, order_number: str) -> Order:
        result = await self.db.execute(select(Order).where(Order.order_number == order_number))
        order = result.scalar_one_or_none()
        if not order:
            raise NotFoundException("Order not found")
        return order

    async def _cancel(self, order: Order, reason: Optional[str], changed_by: uuid.UUID) -> None:
        """Mark cancelled, settle payment status and return stock"""
        previous = order.status
        order.status = OrderStatus.CANCELLED
        order.payment_status = (
            PaymentStatus.REFUNDED if order.payment_status == PaymentStatus.COMPLETED else PaymentStatus.FAILED
        )
        order.cancelled_at = utcnow()
        order.cancellation_reason = reason or "Order cancelled"

        for item in order.items:
            if item.variant_id:
                variant = await self.db.get(ProductVariant, item.variant_id, with_for_update=True)
                if variant:
                    variant.quantity += item.quantity

            product = await self.db.get(Product, item.product_id, with_for_update=True)
            if product:
                product.sold = max(0, (product.sold or 0) - item.quantity)

        if order.coupon_id:
            coupon = await self.db.get(Coupon, order.coupon_id, with_for_update=True)
            if coupon:
                coupon.used_count = max(0, (coupon.used_count or 0) - 1)

        self._record_status(order, OrderStatus.CANCELLED, previous, order.cancellation_reason, changed_by)

    async def cancel_order(
        self,
        order_id: uuid.UUID,
        current_user: CurrentUser,
        reason: Optional[str] = None
    ) -> Order:
        """
        Cancel an order that has not shipped yet

        Raises:
            NotFoundException: If the order does not exist
            ForbiddenException: If it belongs to someone else
            OrderNotCancellableException: If it has shipped, been delivered or cancelled
        """
        try:
            order = await self.get_order(order_id, current_user)
            if not self.state_machine.is_cancellable(order.status):
                raise OrderNotCancellableException("Order cannot be cancelled at this stage")

            await self._cancel(order, reason, current_user.user_id)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Order {order.order_number} cancelled by {current_user.user_id}")
        return await self._load(order.id, refresh=True)

    async def update_status(
        self,
        order_id: uuid.UUID,
        data: OrderStatusUpdate,
        admin: CurrentUser
    ) -> Order:
        """
        Admin status change following the order state machine

        Raises:
            NotFoundException: If the order does not exist
            BadRequestException: If the transition is not allowed
        """
        try:
            order = await self._load(order_id)

            if data.status is not None and data.status != order.status:
                if not self.state_machine.can_transition(order.status, data.status):
                    allowed = ", ".join(s.value for s in self.state_machine.get_valid_transitions(order.status))
                    raise BadRequestException(
                        f"Cannot change order status from {order.status.value} to {data.status.value}",
                        errors=[f"Allowed next statuses: {allowed or 'none'}"]
                    )

                if data.status == OrderStatus.CANCELLED:
                    await self._cancel(order, data.reason, admin.user_id)
                else:
                    previous = order.status
                    order.status = data.status
                    if data.status == OrderStatus.DELIVERED:
                        order.delivered_at = utcnow()
                    self._record_status(order, data.status, previous, data.reason, admin.user_id)

            if data.payment_status is not None:
                order.payment_status = data.payment_status
            if data.admin_notes is not None:
                order.admin_notes = data.admin_notes

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Order {order.order_number} is now {order.status.value}/{order.payment_status.value}")
        return await self._load(order.id, refresh=True)
