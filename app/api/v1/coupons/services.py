"""
Coupon service layer
Admin management of coupons and the usability checks shared with the cart
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_, update
import uuid
import logging

from app.models import Coupon, DiscountType, Cart, Order, OrderStatus
from app.models.base import utcnow, to_money
from app.core.exceptions import (
    BadRequestException,
    NotFoundException,
    InvalidCouponException,
    DuplicateResourceException
)
from app.utils.helpers import as_naive_utc
from app.utils.pagination import paginate, PaginationParams
from app.api.v1.cart.totals import calculate_discount
from .schemas import CouponCreate, CouponUpdate

logger = logging.getLogger(__name__)

ACTIVE_ORDER_STATUSES = (
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
)

def validate_coupon_data(data: Dict[str, Any]) -> List[str]:
    """
    Check coupon business rules

    Returns:
        One message per violated rule, empty when the data is valid
    """
    errors = []

    code = data.get("code")
    if not code or len(code.strip()) < 3:
        errors.append("Coupon code must be at least 3 characters long.")

    discount_type = data.get("discount_type")
    if discount_type not in (DiscountType.PERCENTAGE.value, DiscountType.FIXED.value):
        errors.append("Invalid discount type. Must be PERCENTAGE or FIXED.")

    value = data.get("discount_value")
    if value is None or value <= 0:
        errors.append("Discount value must be a positive number.")
    elif discount_type == DiscountType.PERCENTAGE.value and value > 100:
        errors.append("Percentage discount cannot exceed 100%.")

    if data.get("max_discount") is not None and data["max_discount"] < 0:
        errors.append("Maximum discount must be a non-negative number.")

    start_date, end_date = data.get("start_date"), data.get("end_date")
    if start_date and end_date and end_date <= start_date:
        errors.append("End date must be after start date.")

    if data.get("max_usage") is not None and data["max_usage"] < 0:
        errors.append("Max usage must be a non-negative integer.")

    if data.get("max_usage_per_user") is not None and data["max_usage_per_user"] < 0:
        errors.append("Max usage per user must be a non-negative integer.")

    if data.get("min_order_value") is not None and data["min_order_value"] < 0:
        errors.append("Minimum order value must be a non-negative number.")

    return errors

class CouponService:
    """Coupon service for business logic"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_coupon(self, coupon_id: uuid.UUID) -> Coupon:
        coupon = await self.db.get(Coupon, coupon_id)
        if not coupon:
            raise NotFoundException("Coupon not found")
        return coupon

    async def get_by_code(self, code: str) -> Coupon:
        result = await self.db.execute(
            select(Coupon).where(Coupon.code == code.strip().upper())
        )
        coupon = result.scalar_one_or_none()
        if not coupon:
            raise NotFoundException("Coupon not found")
        return coupon

    async def list_coupons(
        self,
        pagination: PaginationParams,
        active: Optional[bool] = None,
        expired: Optional[bool] = None
    ) -> dict:
        query = select(Coupon)

        if active is not None:
            query = query.where(Coupon.is_active == active)
        if expired is not None:
            now = utcnow()
            query = query.where(Coupon.end_date < now if expired else Coupon.end_date >= now)

        query = query.order_by(Coupon.created_at.desc())
        return await paginate(self.db, query, pagination)

    async def list_public(self) -> List[Coupon]:
        """Coupons a shopper can use right now"""
        now = utcnow()
        result = await self.db.execute(
            select(Coupon)
            .where(
                Coupon.is_active == True,
                Coupon.is_public == True,
                Coupon.start_date <= now,
                Coupon.end_date >= now,
                or_(Coupon.max_usage.is_(None), Coupon.used_count < Coupon.max_usage)
            )
            .order_by(Coupon.created_at.desc())
        )
        return list(result.scalars().all())

    async def _ensure_code_free(self, code: str, exclude_id: Optional[uuid.UUID] = None) -> None:
        query = select(Coupon.id).where(Coupon.code == code)
        if exclude_id is not None:
            query = query.where(Coupon.id != exclude_id)
        if await self.db.scalar(query) is not None:
            raise DuplicateResourceException("Coupon", "code", code)

    async def create_coupon(self, data: CouponCreate) -> Coupon:
        """
        Create a coupon

        Raises:
            BadRequestException: With one entry in ``errors`` per violated rule
            DuplicateResourceException: If the code is taken
        """
        values = data.model_dump()
        values["start_date"] = as_naive_utc(values["start_date"])
        values["end_date"] = as_naive_utc(values["end_date"])

        errors = validate_coupon_data(values)
        if errors:
            raise BadRequestException("Validation failed", errors=errors)

        await self._ensure_code_free(values["code"])

        if values["min_order_value"] is None:
            values["min_order_value"] = Decimal("0.00")
        values["discount_type"] = DiscountType(values["discount_type"])

        coupon = Coupon(**values)
        try:
            self.db.add(coupon)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Coupon created: {coupon.code}")
        return coupon

    async def update_coupon(self, coupon_id: uuid.UUID, data: CouponUpdate) -> Coupon:
        """Partial update, validated against the merged coupon"""
        coupon = await self.get_coupon(coupon_id)
        changes = data.model_dump(exclude_unset=True)
        for field in ("start_date", "end_date"):
            if field in changes:
                changes[field] = as_naive_utc(changes[field])

        merged = {
            "code": coupon.code,
            "discount_type": coupon.discount_type.value,
            "discount_value": coupon.discount_value,
            "min_order_value": coupon.min_order_value,
            "max_discount": coupon.max_discount,
            "max_usage": coupon.max_usage,
            "max_usage_per_user": coupon.max_usage_per_user,
            "start_date": coupon.start_date,
            "end_date": coupon.end_date,
        }
        merged.update({k: v for k, v in changes.items() if k in merged})

        errors = validate_coupon_data(merged)
        if errors:
            raise BadRequestException("Validation failed", errors=errors)

        if "code" in changes and changes["code"] != coupon.code:
            await self._ensure_code_free(changes["code"], exclude_id=coupon.id)

        if "discount_type" in changes:
            changes["discount_type"] = DiscountType(changes["discount_type"])
        if "min_order_value" in changes and changes["min_order_value"] is None:
            changes["min_order_value"] = Decimal("0.00")

        for field, value in changes.items():
            setattr(coupon, field, value)

        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Coupon updated: {coupon.code}")
        return coupon

    async def delete_coupon(self, coupon_id: uuid.UUID) -> None:
        """
        Delete a coupon and detach it from carts

        Raises:
            BadRequestException: If an order still in progress used it
        """
        coupon = await self.get_coupon(coupon_id)

        active_orders = await self.db.scalar(
            select(func.count(Order.id)).where(
                Order.coupon_id == coupon_id,
                Order.status.in_(ACTIVE_ORDER_STATUSES)
            )
        )
        if active_orders:
            raise BadRequestException("Cannot delete coupon. It is currently being used in active orders.")

        try:
            await self.db.execute(
                update(Cart)
                .where(Cart.coupon_id == coupon_id)
                .values(
                    coupon_id=None,
                    discount_amount=Decimal("0.00"),
                    total=Cart.subtotal + Cart.tax_amount + Cart.shipping_amount
                )
                .execution_options(synchronize_session=False)
            )
            await self.db.execute(
                update(Order)
                .where(Order.coupon_id == coupon_id)
                .values(coupon_id=None)
                .execution_options(synchronize_session=False)
            )
            await self.db.delete(coupon)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Coupon deleted: {coupon_id}")

    async def ensure_applicable(self, coupon: Coupon, amount: Decimal, user_id: uuid.UUID) -> None:
        """
        Check that ``coupon`` can be used by ``user_id`` on ``amount``

        Raises:
            InvalidCouponException: With the first failed condition
        """
        now = utcnow()

        if not coupon.is_active:
            raise InvalidCouponException("This coupon is not active.")
        if now < coupon.start_date:
            raise InvalidCouponException("This coupon is not yet valid.")
        if now > coupon.end_date:
            raise InvalidCouponException("This coupon has expired.")
        if coupon.is_exhausted:
            raise InvalidCouponException("This coupon has reached its usage limit.")

        if coupon.max_usage_per_user is not None:
            used_by_user = await self.db.scalar(
                select(func.count(Order.id)).where(
                    Order.user_id == user_id,
                    Order.coupon_id == coupon.id,
                    Order.status != OrderStatus.CANCELLED
                )
            )
            if used_by_user >= coupon.max_usage_per_user:
                raise InvalidCouponException("You have already used this coupon the maximum number of times.")

        if Decimal(amount) < coupon.min_order_value:
            raise InvalidCouponException(
                f"Minimum order value of ${to_money(coupon.min_order_value)} is required."
            )

    async def preview(self, code: str, total_amount: Decimal, user_id: uuid.UUID) -> Dict[str, Any]:
        """Discount the coupon would give on ``total_amount``, nothing is persisted"""
        coupon = await self.get_by_code(code)
        await self.ensure_applicable(coupon, total_amount, user_id)

        discount = calculate_discount(
            coupon.discount_type, coupon.discount_value, total_amount, coupon.max_discount
        )
        return {
            "code": coupon.code,
            "discount_type": coupon.discount_type,
            "discount_amount": discount,
            "total_amount": to_money(total_amount),
            "final_amount": max(Decimal("0.00"), to_money(total_amount) - discount),
        }
