"""
Promotional banner model
"""

from sqlalchemy import Column, String, Boolean, Enum
import enum

from .base import Base, TimestampedModel, UUIDModel

class BannerType(str, enum.Enum):
    MAIN = "MAIN"
    SECONDARY = "SECONDARY"
    PROMO = "PROMO"

class Banner(Base, TimestampedModel, UUIDModel):
    """Homepage banner pointing at a hosted image"""

    __tablename__ = "banners"

    title = Column(String(200), nullable=False)
    subtitle = Column(String(500), nullable=True)
    image_url = Column(String(500), nullable=False)
    link_url = Column(String(500), nullable=True)
    button_text = Column(String(50), nullable=True)
    type = Column(Enum(BannerType), default=BannerType.MAIN, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
