"""API v1 routes aggregation"""

from fastapi import APIRouter

from .auth.router import router as auth_router
from .products.router import router as products_router
from .categories.router import router as categories_router
from .product_types.router import router as product_types_router
from .cart.router import router as cart_router
from .coupons.router import router as coupons_router
from .wishlist.router import router as wishlist_router
from .wishlist.compare import router as compare_router
from .banners.router import router as banners_router
from .orders.router import router as orders_router
from .profile.router import router as profile_router

# Create v1 router
api_router = APIRouter()

# Include all routers
api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
api_router.include_router(products_router, prefix="/products", tags=["Products"])
api_router.include_router(categories_router, prefix="/categories", tags=["Categories"])
api_router.include_router(product_types_router, prefix="/product-types", tags=["Product Types"])
api_router.include_router(cart_router, prefix="/cart", tags=["Cart"])
api_router.include_router(coupons_router, prefix="/coupons", tags=["Coupons"])
api_router.include_router(wishlist_router, prefix="/wishlist", tags=["Wishlist"])
api_router.include_router(compare_router, prefix="/compare", tags=["Compare"])
api_router.include_router(banners_router, prefix="/banners", tags=["Banners"])
api_router.include_router(orders_router, prefix="/orders", tags=["Orders"])
api_router.include_router(profile_router, prefix="/profile", tags=["Profile"])

# Export router
router = api_router
