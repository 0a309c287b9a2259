"""
Shared fixtures

Every test gets a fresh in-memory SQLite schema; the application's get_db
dependency is pointed at it and requests go through httpx's ASGI transport.
"""

import os

os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from decimal import Decimal

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.database import get_db
from app.main import app
from app.models import Base, UserRole, Category, Product, ProductVariant
from tests.helpers import auth_headers, make_user, make_coupon

@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()

@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

@pytest.fixture
def seed(session_factory):
    """Persist rows in their own session and hand them back detached"""

    async def _seed(*rows):
        async with session_factory() as session:
            session.add_all(rows)
            await session.commit()
        return rows[0] if len(rows) == 1 else rows

    return _seed

@pytest.fixture
async def user(seed):
    return await seed(make_user("shopper@example.com"))

@pytest.fixture
async def other_user(seed):
    return await seed(make_user("other@example.com", name="Other User"))

@pytest.fixture
async def admin(seed):
    return await seed(make_user("admin@example.com", UserRole.ADMIN, "Admin"))

@pytest.fixture
def user_headers(user):
    return auth_headers(user)

@pytest.fixture
def other_headers(other_user):
    return auth_headers(other_user)

@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)

@pytest.fixture
async def category(seed):
    return await seed(Category(name="Shirts", slug="shirts"))

@pytest.fixture
async def product(seed, category):
    """Product at 40.00 with two variants holding 10 and 2 units"""
    product = Product(
        name="Linen Shirt",
        slug="linen-shirt",
        price=Decimal("40.00"),
        category_id=category.id,
        sizes=["M", "L"],
        colors=["white", "blue"],
        is_featured=True,
    )
    product.variants = [
        ProductVariant(color="white", size="M", quantity=10),
        ProductVariant(color="blue", size="L", quantity=2),
    ]
    return await seed(product)

@pytest.fixture
async def sale_product(seed):
    """On sale at 60.00, originally 80.00"""
    product = Product(
        name="Wool Coat",
        slug="wool-coat",
        price=Decimal("60.00"),
        origin_price=Decimal("80.00"),
        is_sale=True,
        sizes=["S"],
        colors=["black"],
    )
    product.variants = [ProductVariant(color="black", size="S", quantity=5)]
    return await seed(product)

@pytest.fixture
async def coupon(seed):
    """10% off, no minimum, public"""
    return await seed(make_coupon())
