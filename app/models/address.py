"""
Saved delivery address
"""

from sqlalchemy import Column, String, Boolean, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from .base import Base, TimestampedModel, UUIDModel

class Address(Base, TimestampedModel, UUIDModel):
    """The single saved delivery address of a user"""

    __tablename__ = "addresses"

    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)

    full_name = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=False)
    address_line_one = Column(String(255), nullable=False)
    address_line_two = Column(String(255), nullable=True)
    city = Column(String(100), nullable=False)
    zip_code = Column(String(20), nullable=True)
    country = Column(String(100), nullable=False)
    address_type = Column(String(20), default="HOME", nullable=False)
    is_default = Column(Boolean, default=True, nullable=False)

    user = relationship("User", back_populates="address")

    def as_shipping_address(self) -> dict:
        """Snapshot used on orders"""
        lines = [self.address_line_one, self.address_line_two]
        return {
            "full_name": self.full_name,
            "phone": self.phone,
            "address": ", ".join(line for line in lines if line),
            "city": self.city,
            "postal_code": self.zip_code,
            "country": self.country,
        }
