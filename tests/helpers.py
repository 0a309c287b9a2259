"""Request and row builders shared by the test modules"""

from datetime import timedelta
from decimal import Decimal

from app.core.security import SecurityUtils
from app.models import User, UserRole, Coupon, DiscountType
from app.models.base import utcnow

PASSWORD = "secret123"

SHIPPING_ADDRESS = {
    "full_name": "Jane Doe",
    "phone": "+15551234567",
    "address": "12 Market Street",
    "city": "Springfield",
    "postal_code": "12345",
    "country": "US",
}

def auth_headers(user: User) -> dict:
    token = SecurityUtils.create_access_token({
        "sub": str(user.id),
        "email": user.email,
        "role": user.role.value,
    })
    return {"Authorization": f"Bearer {token}"}

def make_user(email: str, role: UserRole = UserRole.USER, name: str = "Test User") -> User:
    return User(
        email=email,
        name=name,
        password_hash=SecurityUtils.hash_password(PASSWORD),
        role=role,
    )

def make_coupon(code: str = "SAVE10", **overrides) -> Coupon:
    now = utcnow()
    values = {
        "code": code,
        "discount_type": DiscountType.PERCENTAGE,
        "discount_value": Decimal("10"),
        "min_order_value": Decimal("0"),
        "start_date": now - timedelta(days=1),
        "end_date": now + timedelta(days=30),
        "is_active": True,
        "is_public": True,
    }
    values.update(overrides)
    return Coupon(**values)

async def add_to_cart(client, headers, product, variant_index=0, quantity=1):
    return await client.post("/api/cart", headers=headers, json={
        "product_id": str(product.id),
        "variant_id": str(product.variants[variant_index].id),
        "quantity": quantity,
    })

async def variant_stock(client, product, variant_index=0) -> int:
    response = await client.get(f"/api/products/{product.id}/variants")
    assert response.status_code == 200
    stock = {v["id"]: v["quantity"] for v in response.json()["data"]}
    return stock[str(product.variants[variant_index].id)]
