"""
Helper utilities
"""

from datetime import datetime, timezone
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from slugify import slugify
import random
import uuid

def generate_slug(text: str) -> str:
    """
    Generate URL-friendly slug from text

    Args:
        text: Input text

    Returns:
        Slug
    """
    return slugify(text)

async def unique_slug(
    db: AsyncSession,
    model,
    text: str,
    exclude_id: Optional[uuid.UUID] = None
) -> str:
    """
    Slug for ``text`` that is not yet used by another row of ``model``

    A short random suffix is appended when the plain slug is taken.
    """
    base_slug = generate_slug(text) or uuid.uuid4().hex[:8]
    slug = base_slug

    while True:
        query = select(model.id).where(model.slug == slug)
        if exclude_id is not None:
            query = query.where(model.id != exclude_id)
        if await db.scalar(query) is None:
            return slug
        slug = f"{base_slug}-{uuid.uuid4().hex[:6]}"

def generate_order_number() -> str:
    """Order number like ORD-1712345678901-042"""
    timestamp = int(datetime.now(timezone.utc).timestamp() * 1000)
    return f"ORD-{timestamp}-{random.randint(0, 999):03d}"

def as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are stored as naive UTC"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
