from decimal import Decimal

from app.models import Product
from tests.helpers import add_to_cart

def product_payload(**overrides):
    payload = {
        "name": "Canvas Tote",
        "price": 25,
        "brand": "Porter",
        "sizes": ["ONE"],
        "variants": [
            {"color": "natural", "size": "ONE", "quantity": 4},
            {"color": "black", "size": "ONE", "quantity": 6},
        ],
    }
    payload.update(overrides)
    return payload

async def test_admin_creates_product_with_variants(client, admin_headers, category):
    response = await client.post(
        "/api/products",
        headers=admin_headers,
        json=product_payload(category_id=str(category.id))
    )

    product = response.json()["data"]
    assert response.status_code == 201
    assert product["slug"] == "canvas-tote"
    assert product["category"]["name"] == "Shirts"
    assert product["total_stock"] == 10
    assert len(product["variants"]) == 2

async def test_slug_stays_unique(client, admin_headers):
    first = await client.post("/api/products", headers=admin_headers, json=product_payload())
    second = await client.post("/api/products", headers=admin_headers, json=product_payload())

    assert first.json()["data"]["slug"] == "canvas-tote"
    assert second.json()["data"]["slug"].startswith("canvas-tote-")

async def test_duplicate_variants_are_rejected(client, admin_headers):
    response = await client.post("/api/products", headers=admin_headers, json=product_payload(variants=[
        {"color": "black", "size": "ONE", "quantity": 1},
        {"color": "Black", "size": "one", "quantity": 2},
    ]))
    assert response.status_code == 400

async def test_customer_cannot_create_product(client, user_headers):
    response = await client.post("/api/products", headers=user_headers, json=product_payload())
    assert response.status_code == 403

async def test_get_by_id_or_slug(client, product):
    by_id = await client.get(f"/api/products/{product.id}")
    by_slug = await client.get("/api/products/linen-shirt")

    assert by_id.json()["data"]["id"] == by_slug.json()["data"]["id"]
    assert (await client.get("/api/products/no-such-thing")).status_code == 404

async def test_listing_filters_and_hides_inactive(client, admin_headers, product, sale_product, seed):
    await seed(Product(name="Retired", slug="retired", price=Decimal("5"), is_active=False))

    everything = await client.get("/api/products")
    assert everything.json()["data"]["total"] == 2

    on_sale = await client.get("/api/products?is_sale=true")
    assert [p["name"] for p in on_sale.json()["data"]["items"]] == ["Wool Coat"]

    cheap = await client.get("/api/products?max_price=50&sort_by=price")
    assert [p["name"] for p in cheap.json()["data"]["items"]] == ["Linen Shirt"]

    admin_view = await client.get("/api/products/admin/all", headers=admin_headers)
    assert admin_view.json()["data"]["total"] == 3

async def test_inverted_price_range_is_rejected(client):
    response = await client.get("/api/products?min_price=50&max_price=10")
    assert response.status_code == 400

async def test_pagination(client, product, sale_product):
    response = await client.get("/api/products?page=2&limit=1")

    page = response.json()["data"]
    assert page["total"] == 2
    assert page["pages"] == 2
    assert len(page["items"]) == 1

async def test_search_matches_name_and_brand(client, admin_headers, product):
    await client.post("/api/products", headers=admin_headers, json=product_payload())

    by_name = await client.get("/api/products/search?q=linen")
    by_brand = await client.get("/api/products/search?q=porter")

    assert [p["name"] for p in by_name.json()["data"]["items"]] == ["Linen Shirt"]
    assert [p["name"] for p in by_brand.json()["data"]["items"]] == ["Canvas Tote"]

async def test_featured_products(client, product, sale_product):
    response = await client.get("/api/products/featured")
    assert [p["name"] for p in response.json()["data"]] == ["Linen Shirt"]

async def test_increment_views(client, product):
    await client.post(f"/api/products/{product.id}/views")
    response = await client.post(f"/api/products/{product.id}/views")
    assert response.json()["data"]["view_count"] == 2

async def test_status_flags_update(client, admin_headers, product):
    response = await client.put(
        f"/api/products/{product.id}/status",
        headers=admin_headers,
        json={"is_new": True, "is_active": False}
    )

    data = response.json()["data"]
    assert data["is_new"] is True
    assert data["is_active"] is False

    empty = await client.put(f"/api/products/{product.id}/status", headers=admin_headers, json={})
    assert empty.status_code == 422

async def test_inventory_set_and_adjust(client, admin_headers, product):
    variant_id = str(product.variants[1].id)

    response = await client.post(
        f"/api/products/{product.id}/inventory",
        headers=admin_headers,
        json={"variant_id": variant_id, "quantity": 7}
    )
    assert response.json()["data"]["quantity"] == 7

    response = await client.post(
        f"/api/products/{product.id}/inventory",
        headers=admin_headers,
        json={"variant_id": variant_id, "quantity": -3, "mode": "adjust"}
    )
    assert response.json()["data"]["quantity"] == 4

    response = await client.post(
        f"/api/products/{product.id}/inventory",
        headers=admin_headers,
        json={"variant_id": variant_id, "quantity": -10, "mode": "adjust"}
    )
    assert response.status_code == 400

async def test_replacing_variants_keeps_matching_rows(client, admin_headers, product):
    kept_id = str(product.variants[0].id)

    response = await client.put(f"/api/products/{product.id}/variants", headers=admin_headers, json={"variants": [
        {"color": "white", "size": "M", "quantity": 3},
        {"color": "green", "size": "S", "quantity": 1},
    ]})

    variants = {(v["color"], v["size"]): v for v in response.json()["data"]["variants"]}
    assert response.status_code == 200
    assert variants[("white", "M")]["id"] == kept_id
    assert variants[("white", "M")]["quantity"] == 3
    assert ("blue", "L") not in variants

async def test_variant_in_cart_cannot_be_dropped(client, admin_headers, user_headers, product):
    await add_to_cart(client, user_headers, product, variant_index=1)

    response = await client.put(f"/api/products/{product.id}/variants", headers=admin_headers, json={"variants": [
        {"color": "white", "size": "M", "quantity": 3},
    ]})

    assert response.status_code == 409

async def test_product_in_cart_cannot_be_deleted(client, admin_headers, user_headers, product):
    await add_to_cart(client, user_headers, product)

    response = await client.delete(f"/api/products/{product.id}", headers=admin_headers)
    assert response.status_code == 409

async def test_category_lifecycle(client, admin_headers):
    created = await client.post("/api/categories", headers=admin_headers, json={"name": "Outer Wear"})
    category = created.json()["data"]
    assert created.status_code == 201
    assert category["slug"] == "outer-wear"

    duplicate = await client.post("/api/categories", headers=admin_headers, json={"name": "outer wear"})
    assert duplicate.status_code == 409

    renamed = await client.put(
        f"/api/categories/{category['id']}",
        headers=admin_headers,
        json={"name": "Coats", "is_active": False}
    )
    assert renamed.json()["data"]["slug"] == "coats"

    active = await client.get("/api/categories?active_only=true")
    assert active.json()["data"] == []

    deleted = await client.delete(f"/api/categories/{category['id']}", headers=admin_headers)
    assert deleted.status_code == 200

async def test_category_in_use_cannot_be_deleted(client, admin_headers, product, category):
    response = await client.delete(f"/api/categories/{category.id}", headers=admin_headers)
    assert response.status_code == 409

async def test_product_types(client, admin_headers):
    created = await client.post("/api/product-types", headers=admin_headers, json={"name": "Sneaker"})
    assert created.status_code == 201

    listing = await client.get("/api/product-types")
    assert [t["name"] for t in listing.json()["data"]] == ["Sneaker"]
