"""
Product service layer
Handles business logic for products
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_, desc, delete
import uuid
import logging

from app.models import Product, ProductVariant, Category, ProductType, CartItem, OrderItem, WishlistItem, CompareItem
from app.core.exceptions import NotFoundException, BadRequestException, ConflictException
from app.utils.helpers import unique_slug
from app.utils.pagination import paginate, PaginationParams
from .schemas import (
    ProductCreate,
    ProductUpdate,
    ProductStatusUpdate,
    ProductListParams,
    VariantInput,
    InventoryUpdate
)

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "created_at": Product.created_at,
    "price": Product.price,
    "name": Product.name,
    "sold": Product.sold,
}

def _variant_key(color: Optional[str], color_name: Optional[str], size: Optional[str]) -> tuple:
    return ((color or color_name or "").lower(), (size or "").lower())

class ProductService:
    """Product service for business logic"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_product(self, product_id: uuid.UUID, refresh: bool = False) -> Product:
        """
        Get product with category, type and variants loaded

        Raises:
            NotFoundException: If product not found
        """
        query = select(Product).where(Product.id == product_id)
        if refresh:
            query = query.execution_options(populate_existing=True)
        result = await self.db.execute(query)
        product = result.scalar_one_or_none()

        if not product:
            raise NotFoundException("Product not found")

        return product

    async def get_product_by_id_or_slug(self, identifier: str) -> Product:
        """Look a product up by UUID, falling back to its slug"""
        try:
            product_id = uuid.UUID(identifier)
        except ValueError:
            product_id = None

        if product_id is not None:
            return await self.get_product(product_id)

        result = await self.db.execute(select(Product).where(Product.slug == identifier))
        product = result.scalar_one_or_none()
        if not product:
            raise NotFoundException("Product not found")
        return product

    async def list_products(
        self,
        filters: ProductListParams,
        pagination: PaginationParams,
        include_inactive: bool = False
    ) -> dict:
        """
        List products with filters, newest or best-selling first

        Args:
            filters: Catalog filters and sort column
            pagination: Page number and size
            include_inactive: Admin listing shows hidden products too

        Returns:
            Paginated products
        """
        if filters.min_price is not None and filters.max_price is not None:
            if filters.min_price > filters.max_price:
                raise BadRequestException("min_price cannot be greater than max_price")

        query = select(Product)

        if not include_inactive:
            query = query.where(Product.is_active == True)
        if filters.category_id:
            query = query.where(Product.category_id == filters.category_id)
        if filters.type_id:
            query = query.where(Product.type_id == filters.type_id)
        if filters.gender:
            query = query.where(Product.gender == filters.gender)
        if filters.brand:
            query = query.where(func.lower(Product.brand) == filters.brand.lower())
        if filters.is_new is not None:
            query = query.where(Product.is_new == filters.is_new)
        if filters.is_sale is not None:
            query = query.where(Product.is_sale == filters.is_sale)
        if filters.is_flash_sale is not None:
            query = query.where(Product.is_flash_sale == filters.is_flash_sale)
        if filters.min_price is not None:
            query = query.where(Product.price >= filters.min_price)
        if filters.max_price is not None:
            query = query.where(Product.price <= filters.max_price)

        query = query.order_by(desc(SORT_COLUMNS[filters.sort_by]), Product.id)

        return await paginate(self.db, query, pagination)

    async def search_products(self, term: str, pagination: PaginationParams) -> dict:
        """Case-insensitive match on name, description and brand"""
        pattern = f"%{term.strip()}%"
        query = (
            select(Product)
            .where(
                Product.is_active == True,
                or_(
                    Product.name.ilike(pattern),
                    Product.description.ilike(pattern),
                    Product.brand.ilike(pattern),
                )
            )
            .order_by(desc(Product.sold), desc(Product.created_at))
        )
        return await paginate(self.db, query, pagination)

    async def get_featured(self, limit: int) -> List[Product]:
        result = await self.db.execute(
            select(Product)
            .where(Product.is_featured == True, Product.is_active == True)
            .order_by(desc(Product.created_at))
            .limit(limit)
        )
        return list(result.scalars().all())

    async def increment_views(self, product_id: uuid.UUID) -> int:
        product = await self.get_product(product_id)
        product.view_count = (product.view_count or 0) + 1
        await self.db.commit()
        return product.view_count

    async def _check_lookups(self, category_id: Optional[uuid.UUID], type_id: Optional[uuid.UUID]) -> None:
        if category_id and not await self.db.get(Category, category_id):
            raise NotFoundException("Category not found")
        if type_id and not await self.db.get(ProductType, type_id):
            raise NotFoundException("Product type not found")

    @staticmethod
    def _check_duplicate_variants(variants: List[VariantInput]) -> None:
        keys = [_variant_key(v.color, v.color_name, v.size) for v in variants]
        if len(keys) != len(set(keys)):
            raise BadRequestException("Duplicate variant (same color and size) in request")

    async def create_product(self, data: ProductCreate) -> Product:
        """
        Create new product together with its variants

        Args:
            data: Product creation data

        Returns:
            Created product

        Raises:
            NotFoundException: If category or type does not exist
            BadRequestException: If two variants share color and size
        """
        await self._check_lookups(data.category_id, data.type_id)
        self._check_duplicate_variants(data.variants)

        product = Product(
            slug=await unique_slug(self.db, Product, data.name),
            **data.model_dump(exclude={"variants"})
        )
        product.variants = [ProductVariant(**variant.model_dump()) for variant in data.variants]

        try:
            self.db.add(product)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Product created: {product.name} ({product.id}) with {len(data.variants)} variants")
        return await self.get_product(product.id, refresh=True)

    async def update_product(self, product_id: uuid.UUID, data: ProductUpdate) -> Product:
        """
        Update existing product

        Raises:
            NotFoundException: If product, category or type not found
            ConflictException: If a dropped variant is still in a cart or order
        """
        product = await self.get_product(product_id)
        changes = data.model_dump(exclude_unset=True, exclude={"variants"})

        await self._check_lookups(changes.get("category_id"), changes.get("type_id"))

        try:
            if "name" in changes and changes["name"] != product.name:
                product.slug = await unique_slug(self.db, Product, changes["name"], exclude_id=product.id)

            for field, value in changes.items():
                setattr(product, field, value)

            if data.variants is not None:
                await self._replace_variants(product, data.variants)

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        return await self.get_product(product.id, refresh=True)

    async def replace_variants(self, product_id: uuid.UUID, variants: List[VariantInput]) -> Product:
        product = await self.get_product(product_id)
        try:
            await self._replace_variants(product, variants)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        return await self.get_product(product.id, refresh=True)

    async def _replace_variants(self, product: Product, variants: List[VariantInput]) -> None:
        """
        Make the product's variant set equal to ``variants``

        Variants are matched on color and size so rows referenced by carts
        and orders keep their ids; unmatched rows are deleted.
        """
        self._check_duplicate_variants(variants)

        existing = {_variant_key(v.color, v.color_name, v.size): v for v in product.variants}
        kept = []

        for variant_input in variants:
            key = _variant_key(variant_input.color, variant_input.color_name, variant_input.size)
            variant = existing.pop(key, None)
            if variant is None:
                variant = ProductVariant(product_id=product.id)
            for field, value in variant_input.model_dump().items():
                setattr(variant, field, value)
            kept.append(variant)

        for dropped in existing.values():
            await self._ensure_variant_unreferenced(dropped)

        product.variants = kept

    async def _ensure_variant_unreferenced(self, variant: ProductVariant) -> None:
        in_carts = await self.db.scalar(
            select(func.count(CartItem.id)).where(CartItem.variant_id == variant.id)
        )
        in_orders = await self.db.scalar(
            select(func.count(OrderItem.id)).where(OrderItem.variant_id == variant.id)
        )
        if in_carts or in_orders:
            raise ConflictException(
                f"Variant {variant.id} is referenced by carts or orders and cannot be removed"
            )

    async def update_status(self, product_id: uuid.UUID, data: ProductStatusUpdate) -> Product:
        product = await self.get_product(product_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(product, field, value)
        await self.db.commit()
        return await self.get_product(product.id, refresh=True)

    async def update_inventory(self, product_id: uuid.UUID, data: InventoryUpdate) -> ProductVariant:
        """
        Set or adjust the stock of one variant

        Raises:
            NotFoundException: If the variant does not belong to the product
            BadRequestException: If an adjustment would make stock negative
        """
        result = await self.db.execute(
            select(ProductVariant)
            .where(ProductVariant.id == data.variant_id, ProductVariant.product_id == product_id)
            .with_for_update()
        )
        variant = result.scalar_one_or_none()
        if not variant:
            raise NotFoundException("Variant not found")

        new_quantity = data.quantity if data.mode == "set" else variant.quantity + data.quantity
        if new_quantity < 0:
            raise BadRequestException(f"Stock cannot go below zero (current stock {variant.quantity})")

        variant.quantity = new_quantity
        await self.db.commit()

        logger.info(f"Stock of variant {variant.id} is now {new_quantity}")
        return variant

    async def delete_product(self, product_id: uuid.UUID) -> None:
        """
        Delete a product and its variants

        Raises:
            ConflictException: If the product is in a cart or an order
        """
        product = await self.get_product(product_id)

        in_orders = await self.db.scalar(
            select(func.count(OrderItem.id)).where(OrderItem.product_id == product_id)
        )
        if in_orders:
            raise ConflictException("Product has been ordered and cannot be deleted; deactivate it instead")

        in_carts = await self.db.scalar(
            select(func.count(CartItem.id)).where(CartItem.product_id == product_id)
        )
        if in_carts:
            raise ConflictException("Product is in customer carts and cannot be deleted")

        try:
            for model in (WishlistItem, CompareItem):
                await self.db.execute(delete(model).where(model.product_id == product_id))
            await self.db.delete(product)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Product deleted: {product_id}")
