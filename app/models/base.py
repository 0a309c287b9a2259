"""Base models and mixins for database models"""

from sqlalchemy import Column, DateTime, String, Uuid
from sqlalchemy.orm import DeclarativeBase, declared_attr
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
import uuid

CENT = Decimal("0.01")

def utcnow() -> datetime:
    """Naive UTC timestamp, comparable with values read back from the database"""
    return datetime.now(timezone.utc).replace(tzinfo=None)

def to_money(value) -> Decimal:
    """Round a monetary amount to cents"""
    return Decimal(str(value or 0)).quantize(CENT, rounding=ROUND_HALF_UP)

# Create declarative base
class Base(DeclarativeBase):
    pass

class TimestampedModel:
    """Mixin for adding created_at and updated_at timestamps"""

    @declared_attr
    def created_at(cls):
        return Column(
            DateTime,
            nullable=False,
            default=utcnow,
            index=True
        )

    @declared_attr
    def updated_at(cls):
        return Column(
            DateTime,
            nullable=False,
            default=utcnow,
            onupdate=utcnow
        )

class UUIDModel:
    """Mixin for adding UUID primary key"""

    @declared_attr
    def id(cls):
        return Column(
            Uuid,
            primary_key=True,
            default=uuid.uuid4,
            nullable=False
        )

class SluggedModel:
    """Mixin for URL-friendly slugs"""

    @declared_attr
    def slug(cls):
        return Column(
            String(255),
            nullable=False,
            unique=True,
            index=True
        )
