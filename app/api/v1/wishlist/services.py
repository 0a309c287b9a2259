"""
Wishlist and compare list services

Both lists hold at most one entry per (user, product). The compare list is
additionally capped at MAX_COMPARE_PRODUCTS.
"""

from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, delete
import uuid
import logging

from app.models import Product, WishlistItem, CompareItem
from app.core.config import settings
from app.core.exceptions import NotFoundException, BadRequestException, ConflictException

logger = logging.getLogger(__name__)

class WishlistService:
    """Products a user saved for later"""

    model = WishlistItem
    label = "wishlist"

    def __init__(self, db: AsyncSession):
        self.db = db

    def _ordering(self):
        return self.model.created_at.desc()

    async def list_items(self, user_id: uuid.UUID) -> List:
        result = await self.db.execute(
            select(self.model)
            .where(self.model.user_id == user_id)
            .order_by(self._ordering())
        )
        return list(result.scalars().all())

    async def count(self, user_id: uuid.UUID) -> int:
        return await self.db.scalar(
            select(func.count(self.model.id)).where(self.model.user_id == user_id)
        ) or 0

    async def contains(self, user_id: uuid.UUID, product_id: uuid.UUID) -> bool:
        found = await self.db.scalar(
            select(self.model.id).where(
                self.model.user_id == user_id,
                self.model.product_id == product_id
            )
        )
        return found is not None

    async def _check_capacity(self, user_id: uuid.UUID) -> None:
        """Lists are unbounded unless a subclass says otherwise"""

    async def add(self, user_id: uuid.UUID, product_id: uuid.UUID):
        """
        Put a product on the list

        Raises:
            NotFoundException: If the product does not exist
            ConflictException: If it is already on the list
        """
        product = await self.db.get(Product, product_id)
        if not product:
            raise NotFoundException("Product not found")

        if await self.contains(user_id, product_id):
            raise ConflictException(f"Product already in {self.label}")

        await self._check_capacity(user_id)

        item = self.model(user_id=user_id, product_id=product_id, product=product)
        try:
            self.db.add(item)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Product {product_id} added to {self.label} of user {user_id}")
        return item

    async def remove(self, user_id: uuid.UUID, product_id: uuid.UUID) -> None:
        result = await self.db.execute(
            select(self.model).where(
                self.model.user_id == user_id,
                self.model.product_id == product_id
            )
        )
        item = result.scalar_one_or_none()
        if not item:
            raise NotFoundException(f"Product not found in {self.label}")

        await self.db.delete(item)
        await self.db.commit()

    async def clear(self, user_id: uuid.UUID) -> int:
        """Remove every entry; returns how many were removed"""
        result = await self.db.execute(
            delete(self.model).where(self.model.user_id == user_id)
        )
        await self.db.commit()
        return result.rowcount or 0

class CompareService(WishlistService):
    """Side-by-side comparison list, oldest entry first"""

    model = CompareItem
    label = "compare list"

    def _ordering(self):
        return self.model.created_at.asc()

    async def _check_capacity(self, user_id: uuid.UUID) -> None:
        if await self.count(user_id) >= settings.MAX_COMPARE_PRODUCTS:
            raise BadRequestException(
                f"Maximum {settings.MAX_COMPARE_PRODUCTS} products allowed in compare list",
                error_code="COMPARE_LIMIT_REACHED"
            )

    def remaining_slots(self, total: int) -> int:
        return max(0, settings.MAX_COMPARE_PRODUCTS - total)

    async def comparison(self, user_id: uuid.UUID) -> dict:
        """
        Comparison matrix of the listed products

        Returns:
            The products' comparable attributes, the union of their sizes
            and colors, and the price range
        """
        items = await self.list_items(user_id)
        products = [item.product for item in items]

        sizes, colors = [], []
        for product in products:
            for size in product.sizes or []:
                if size not in sizes:
                    sizes.append(size)
            for color in product.colors or []:
                if color not in colors:
                    colors.append(color)

        price_range = None
        if products:
            prices = [product.price for product in products]
            price_range = {"min": min(prices), "max": max(prices)}

        return {
            "products": [
                {
                    "id": product.id,
                    "name": product.name,
                    "slug": product.slug,
                    "price": product.price,
                    "origin_price": product.origin_price,
                    "brand": product.brand,
                    "category": product.category.name if product.category else None,
                    "is_new": product.is_new,
                    "is_sale": product.is_sale,
                    "is_flash_sale": product.is_flash_sale,
                    "thumb_image": product.thumb_image,
                    "sizes": product.sizes or [],
                    "colors": product.colors or [],
                    "weight": float(product.weight) if product.weight is not None else None,
                    "total_stock": product.total_stock,
                }
                for product in products
            ],
            "sizes": sizes,
            "colors": colors,
            "price_range": price_range,
            "comparison_fields": [
                "name", "price", "origin_price", "brand", "category",
                "is_sale", "is_flash_sale", "is_new", "sizes", "colors", "weight",
            ],
            "total": len(products),
            "max_limit": settings.MAX_COMPARE_PRODUCTS,
        }
