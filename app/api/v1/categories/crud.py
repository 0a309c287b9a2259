"""
CRUD operations for the catalog lookup tables

Categories and product types share the same shape: a unique name, a slug
derived from it, and products pointing at them. Every function takes the
mapped class so both routers use the same code.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from pydantic import BaseModel
from typing import List
import uuid
import logging

from app.models import Category, ProductType, Product
from app.core.exceptions import NotFoundException, ConflictException, DuplicateResourceException
from app.utils.helpers import unique_slug

logger = logging.getLogger(__name__)

LookupModel = type[Category] | type[ProductType]

_PRODUCT_COLUMN = {
    Category: Product.category_id,
    ProductType: Product.type_id,
}

def _label(model: LookupModel) -> str:
    return "Category" if model is Category else "Product type"

async def get_all(db: AsyncSession, model: LookupModel, active_only: bool = False) -> List:
    """Get all rows ordered by name"""
    stmt = select(model).order_by(model.name)
    if active_only and model is Category:
        stmt = stmt.where(Category.is_active == True)
    result = await db.execute(stmt)
    return list(result.scalars().all())

async def get_by_id(db: AsyncSession, model: LookupModel, item_id: uuid.UUID):
    """Get row by ID or raise 404"""
    result = await db.execute(select(model).where(model.id == item_id))
    item = result.scalar_one_or_none()
    if not item:
        raise NotFoundException(f"{_label(model)} not found")
    return item

async def _ensure_unique_name(db: AsyncSession, model: LookupModel, name: str, exclude_id: uuid.UUID = None) -> None:
    stmt = select(model.id).where(func.lower(model.name) == name.lower())
    if exclude_id is not None:
        stmt = stmt.where(model.id != exclude_id)
    if await db.scalar(stmt) is not None:
        raise DuplicateResourceException(_label(model), "name", name)

async def create(db: AsyncSession, model: LookupModel, data: BaseModel):
    """Create a row with a slug derived from its name"""
    await _ensure_unique_name(db, model, data.name)

    item = model(**data.model_dump())
    item.slug = await unique_slug(db, model, data.name)

    try:
        db.add(item)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(f"{_label(model)} created: {item.name}")
    return item

async def update(db: AsyncSession, model: LookupModel, item_id: uuid.UUID, data: BaseModel):
    """Partial update; renaming regenerates the slug"""
    item = await get_by_id(db, model, item_id)
    changes = data.model_dump(exclude_unset=True)

    if "name" in changes and changes["name"] != item.name:
        await _ensure_unique_name(db, model, changes["name"], exclude_id=item.id)
        item.slug = await unique_slug(db, model, changes["name"], exclude_id=item.id)

    for field, value in changes.items():
        setattr(item, field, value)

    await db.commit()
    return item

async def delete(db: AsyncSession, model: LookupModel, item_id: uuid.UUID) -> None:
    """Delete a row that no product references"""
    item = await get_by_id(db, model, item_id)

    column = _PRODUCT_COLUMN[model]
    product_count = await db.scalar(select(func.count(Product.id)).where(column == item.id))
    if product_count:
        raise ConflictException(
            f"{_label(model)} is used by {product_count} product(s) and cannot be deleted"
        )

    try:
        await db.delete(item)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(f"{_label(model)} deleted: {item.name}")
