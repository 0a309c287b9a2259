"""Models package initialization"""

from .base import Base
from .user import User, UserRole, Gender
from .address import Address
from .category import Category, ProductType
from .product import Product, ProductVariant, ProductGender
from .cart import Cart, CartItem, CartStatus
from .coupon import Coupon, DiscountType
from .wishlist import WishlistItem, CompareItem
from .banner import Banner, BannerType
from .order import Order, OrderItem, OrderStatus, PaymentStatus, OrderStatusHistory

# Export all models
__all__ = [
    "Base",
    "User",
    "UserRole",
    "Gender",
    "Address",
    "Category",
    "ProductType",
    "Product",
    "ProductVariant",
    "ProductGender",
    "Cart",
    "CartItem",
    "CartStatus",
    "Coupon",
    "DiscountType",
    "WishlistItem",
    "CompareItem",
    "Banner",
    "BannerType",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentStatus",
    "OrderStatusHistory",
]
