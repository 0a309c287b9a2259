"""
CRUD operations for banners
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List
import uuid
import logging

from app.models import Banner
from app.core.exceptions import NotFoundException
from .schemas import BannerCreate, BannerUpdate

logger = logging.getLogger(__name__)

async def get_all(db: AsyncSession, active_only: bool = False) -> List[Banner]:
    """Banners, newest first"""
    stmt = select(Banner).order_by(Banner.created_at.desc())
    if active_only:
        stmt = stmt.where(Banner.is_active == True)
    result = await db.execute(stmt)
    return list(result.scalars().all())

async def get_by_id(db: AsyncSession, banner_id: uuid.UUID) -> Banner:
    banner = await db.get(Banner, banner_id)
    if not banner:
        raise NotFoundException("Banner not found")
    return banner

async def create(db: AsyncSession, data: BannerCreate) -> Banner:
    banner = Banner(**data.model_dump())
    db.add(banner)
    await db.commit()
    logger.info(f"Banner created: {banner.title}")
    return banner

async def update(db: AsyncSession, banner_id: uuid.UUID, data: BannerUpdate) -> Banner:
    banner = await get_by_id(db, banner_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(banner, field, value)
    await db.commit()
    return banner

async def delete(db: AsyncSession, banner_id: uuid.UUID) -> None:
    banner = await get_by_id(db, banner_id)
    await db.delete(banner)
    await db.commit()
    logger.info(f"Banner deleted: {banner_id}")
