"""
Cart service layer
Handles shopping cart business logic

Every mutation runs in one transaction: the item change, the variant stock
hold and the recomputed totals are committed together or not at all.
"""

from typing import Optional
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import uuid
import logging

from app.models import Cart, CartItem, CartStatus, Product, ProductVariant
from app.models.base import to_money
from app.core.config import settings
from app.utils.helpers import as_naive_utc
from app.core.exceptions import (
    NotFoundException,
    BadRequestException,
    InsufficientStockException,
    InvalidCouponException
)
from app.api.v1.coupons.services import CouponService
from .schemas import CartItemCreate, CartItemDetailsUpdate, CartSettingsUpdate
from .totals import ZERO, CartTotals, calculate_totals, calculate_discount, discounted_total

logger = logging.getLogger(__name__)

ITEM_NOT_FOUND = "Cart item not found or you are not authorized"

def price_snapshot(product: Product, variant: ProductVariant) -> dict:
    """Prices and display fields copied onto a cart item"""
    original_price = to_money(product.origin_price or product.price)
    sale_price = to_money(product.price) if product.is_sale else original_price

    return {
        "original_price": original_price,
        "sale_price": sale_price,
        "price": sale_price,
        "product_name": product.name,
        "product_image": variant.image or product.thumb_image,
        "product_slug": product.slug,
        "sku": variant.sku,
        "color": variant.color or variant.color_name,
        "size": variant.size,
        "weight": product.weight,
    }

class CartService:
    """Shopping cart service"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.coupons = CouponService(db)

    async def get_cart(self, user_id: uuid.UUID, for_update: bool = False) -> Optional[Cart]:
        """The user's ACTIVE cart, or None if it was never created"""
        query = select(Cart).where(Cart.user_id == user_id, Cart.status == CartStatus.ACTIVE)
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query.limit(1))
        return result.scalar_one_or_none()

    async def _require_cart(self, user_id: uuid.UUID, message: str = "Cart not found") -> Cart:
        cart = await self.get_cart(user_id, for_update=True)
        if not cart:
            raise NotFoundException(message)
        return cart

    async def _get_or_create_cart(self, user_id: uuid.UUID) -> Cart:
        cart = await self.get_cart(user_id, for_update=True)
        if cart:
            return cart

        cart = Cart(
            user_id=user_id,
            status=CartStatus.ACTIVE,
            currency=settings.DEFAULT_CURRENCY,
            payment_method=settings.DEFAULT_PAYMENT_METHOD,
            shipping_method=settings.DEFAULT_SHIPPING_METHOD,
            items=[],
            coupon=None,
        )
        self.db.add(cart)
        logger.info(f"Cart created for user {user_id}")
        return cart

    async def _reload(self, cart_id: uuid.UUID) -> Cart:
        result = await self.db.execute(
            select(Cart).where(Cart.id == cart_id).execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def _lock_variant(self, variant_id: uuid.UUID) -> Optional[ProductVariant]:
        result = await self.db.execute(
            select(ProductVariant).where(ProductVariant.id == variant_id).with_for_update()
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _find_item(cart: Cart, item_id: uuid.UUID) -> CartItem:
        for item in cart.items:
            if item.id == item_id:
                return item
        raise NotFoundException(ITEM_NOT_FOUND)

    @staticmethod
    def store_totals(cart: Cart, totals: CartTotals, discount: Decimal) -> None:
        cart.subtotal = totals.subtotal
        cart.tax_amount = totals.tax_amount
        cart.shipping_amount = totals.shipping_amount
        cart.total_items = totals.total_items
        cart.discount_amount = discount
        cart.total = discounted_total(totals, discount)

    async def recalculate(self, cart: Cart, user_id: uuid.UUID) -> None:
        """
        Recompute totals from the current items

        An applied coupon is checked again against the new subtotal and
        dropped when it no longer qualifies.
        """
        totals = calculate_totals(cart.items)
        discount = ZERO

        coupon = cart.coupon
        if coupon is not None:
            try:
                if not cart.items:
                    raise InvalidCouponException("Cart is empty")
                await self.coupons.ensure_applicable(coupon, totals.subtotal, user_id)
                discount = calculate_discount(
                    coupon.discount_type, coupon.discount_value, totals.subtotal, coupon.max_discount
                )
            except InvalidCouponException as exc:
                logger.info(f"Coupon {coupon.code} removed from cart {cart.id}: {exc.detail}")
                cart.coupon = None

        self.store_totals(cart, totals, discount)

    async def add_item(self, user_id: uuid.UUID, data: CartItemCreate) -> Cart:
        """
        Add a product variant to the user's cart

        Creates the cart on first use. Adding a variant already in the cart
        increases its quantity and refreshes the price snapshot. The
        requested quantity is held from the variant's stock.

        Args:
            user_id: Owner of the cart
            data: Product, variant, quantity and gift options

        Returns:
            Updated cart

        Raises:
            NotFoundException: If the product or variant does not exist
            InsufficientStockException: If stock cannot cover the quantity
        """
        try:
            product = await self.db.get(Product, data.product_id)
            variant = await self._lock_variant(data.variant_id)

            if not product or not product.is_active or not variant or variant.product_id != product.id:
                raise NotFoundException("Product or variant not found")

            if variant.quantity < data.quantity:
                logger.warning(
                    f"Add to cart rejected for user {user_id}: {data.quantity} requested, "
                    f"{variant.quantity} in stock for variant {variant.id}"
                )
                raise InsufficientStockException(product.name, variant.quantity)

            cart = await self._get_or_create_cart(user_id)
            snapshot = price_snapshot(product, variant)
            variant.quantity -= data.quantity

            item = next(
                (i for i in cart.items if i.product_id == product.id and i.variant_id == variant.id),
                None
            )
            if item is None:
                item = CartItem(
                    product_id=product.id,
                    variant_id=variant.id,
                    quantity=data.quantity,
                    customization=data.customization,
                    is_gift=data.is_gift,
                    gift_message=data.gift_message,
                    **snapshot
                )
                cart.items.append(item)
            else:
                for field, value in snapshot.items():
                    setattr(item, field, value)
                item.quantity += data.quantity
                if data.customization is not None:
                    item.customization = data.customization
                if "is_gift" in data.model_fields_set:
                    item.is_gift = data.is_gift
                if data.gift_message is not None:
                    item.gift_message = data.gift_message

            item.total_price = to_money(item.price * item.quantity)
            item.stock = variant.quantity

            await self.recalculate(cart, user_id)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Added {data.quantity} x variant {data.variant_id} to cart {cart.id}")
        return await self._reload(cart.id)

    async def update_item_quantity(self, user_id: uuid.UUID, item_id: uuid.UUID, quantity: int) -> Cart:
        """
        Set an item's quantity, moving the difference to or from stock

        Raises:
            NotFoundException: If the item is not in the user's cart
            InsufficientStockException: If stock plus the held quantity is too small
        """
        try:
            cart = await self._require_cart(user_id, ITEM_NOT_FOUND)
            item = self._find_item(cart, item_id)

            variant = await self._lock_variant(item.variant_id)
            if not variant:
                raise NotFoundException("Product variant details not found")

            available = variant.quantity + item.quantity
            if quantity > available:
                raise InsufficientStockException(item.product_name, available)

            variant.quantity -= quantity - item.quantity
            item.quantity = quantity
            item.total_price = to_money(item.price * quantity)
            item.stock = variant.quantity

            await self.recalculate(cart, user_id)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        return await self._reload(cart.id)

    async def update_item_details(
        self,
        user_id: uuid.UUID,
        item_id: uuid.UUID,
        data: CartItemDetailsUpdate
    ) -> CartItem:
        """Gift flag, gift message and customization; prices are untouched"""
        cart = await self._require_cart(user_id, ITEM_NOT_FOUND)
        item = self._find_item(cart, item_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(item, field, value)

        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        return item

    async def remove_item(self, user_id: uuid.UUID, item_id: uuid.UUID) -> Cart:
        """
        Delete an item and return its quantity to stock

        Raises:
            NotFoundException: If the item is not in the user's cart
        """
        try:
            cart = await self._require_cart(user_id, ITEM_NOT_FOUND)
            item = self._find_item(cart, item_id)

            variant = await self._lock_variant(item.variant_id)
            if variant:
                variant.quantity += item.quantity

            cart.items.remove(item)

            await self.recalculate(cart, user_id)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Item {item_id} removed from cart {cart.id}")
        return await self._reload(cart.id)

    async def clear_cart(self, user_id: uuid.UUID) -> Cart:
        """
        Return every held quantity to stock and empty the cart in place

        Totals and discount are zeroed, the coupon and notes are unset.

        Raises:
            NotFoundException: If the user has no cart
        """
        try:
            cart = await self._require_cart(user_id)

            for item in cart.items:
                variant = await self._lock_variant(item.variant_id)
                if variant:
                    variant.quantity += item.quantity

            cart.items.clear()
            cart.coupon = None
            cart.notes = None
            self.store_totals(cart, CartTotals.empty(), ZERO)

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Cart {cart.id} cleared")
        return await self._reload(cart.id)

    async def update_settings(self, user_id: uuid.UUID, data: CartSettingsUpdate) -> Cart:
        """Payment method, shipping method and address, notes, delivery estimate, currency"""
        cart = await self._require_cart(user_id)

        changes = data.model_dump(exclude_unset=True)
        if "estimated_delivery" in changes:
            changes["estimated_delivery"] = as_naive_utc(changes["estimated_delivery"])

        for field, value in changes.items():
            setattr(cart, field, value)

        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        return await self._reload(cart.id)

    async def apply_coupon(self, user_id: uuid.UUID, coupon_code: str) -> Cart:
        """
        Apply a coupon to the cart subtotal

        Raises:
            NotFoundException: If the cart or the coupon does not exist
            BadRequestException: If the cart is empty
            InvalidCouponException: If the coupon is inactive, outside its
                window, used up, or the subtotal is below its minimum
        """
        try:
            cart = await self._require_cart(user_id)
            if not cart.items:
                raise BadRequestException("Cart is empty")

            coupon = await self.coupons.get_by_code(coupon_code)
            totals = calculate_totals(cart.items)

            try:
                await self.coupons.ensure_applicable(coupon, totals.subtotal, user_id)
            except InvalidCouponException as exc:
                logger.warning(f"Coupon {coupon.code} rejected for cart {cart.id}: {exc.detail}")
                raise

            discount = calculate_discount(
                coupon.discount_type, coupon.discount_value, totals.subtotal, coupon.max_discount
            )
            cart.coupon = coupon
            self.store_totals(cart, totals, discount)

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Coupon {coupon.code} applied to cart {cart.id}, discount {discount}")
        return await self._reload(cart.id)

    async def remove_coupon(self, user_id: uuid.UUID) -> Cart:
        """Unset the coupon and restore the undiscounted total"""
        try:
            cart = await self._require_cart(user_id)
            cart.coupon = None
            self.store_totals(cart, calculate_totals(cart.items), ZERO)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        return await self._reload(cart.id)
