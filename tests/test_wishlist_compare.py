import uuid
from decimal import Decimal

from app.models import Product

async def seed_products(seed, count):
    products = [
        Product(name=f"Sneaker {i}", slug=f"sneaker-{i}", price=Decimal(20 + i * 10), sizes=[str(40 + i)])
        for i in range(count)
    ]
    return await seed(*products)

async def test_wishlist_add_list_and_check(client, user_headers, product):
    added = await client.post("/api/wishlist", headers=user_headers, json={"product_id": str(product.id)})

    assert added.status_code == 201
    assert added.json()["data"]["product"]["name"] == "Linen Shirt"

    listing = await client.get("/api/wishlist", headers=user_headers)
    assert listing.json()["data"]["total"] == 1

    check = await client.get(f"/api/wishlist/check/{product.id}", headers=user_headers)
    assert check.json()["data"]["in_wishlist"] is True

async def test_wishlist_rejects_duplicates(client, user_headers, product):
    await client.post("/api/wishlist", headers=user_headers, json={"product_id": str(product.id)})
    response = await client.post("/api/wishlist", headers=user_headers, json={"product_id": str(product.id)})

    assert response.status_code == 409
    assert response.json()["message"] == "Product already in wishlist"

async def test_wishlist_unknown_product(client, user_headers):
    response = await client.post("/api/wishlist", headers=user_headers, json={"product_id": str(uuid.uuid4())})
    assert response.status_code == 404

async def test_wishlists_are_per_user(client, user_headers, other_headers, product):
    await client.post("/api/wishlist", headers=user_headers, json={"product_id": str(product.id)})

    listing = await client.get("/api/wishlist", headers=other_headers)
    assert listing.json()["data"]["items"] == []

    removed = await client.delete(f"/api/wishlist/{product.id}", headers=other_headers)
    assert removed.status_code == 404

async def test_wishlist_remove_and_clear(client, user_headers, product, sale_product):
    for item in (product, sale_product):
        await client.post("/api/wishlist", headers=user_headers, json={"product_id": str(item.id)})

    removed = await client.delete(f"/api/wishlist/{product.id}", headers=user_headers)
    assert removed.status_code == 200

    cleared = await client.delete("/api/wishlist", headers=user_headers)
    assert cleared.json()["data"]["removed"] == 1

    check = await client.get(f"/api/wishlist/check/{sale_product.id}", headers=user_headers)
    assert check.json()["data"]["in_wishlist"] is False

async def test_compare_list_is_capped(client, user_headers, seed):
    products = await seed_products(seed, 4)

    for product in products[:3]:
        response = await client.post("/api/compare", headers=user_headers, json={"product_id": str(product.id)})
        assert response.status_code == 201

    assert response.json()["data"]["remaining_slots"] == 0

    response = await client.post("/api/compare", headers=user_headers, json={"product_id": str(products[3].id)})

    body = response.json()
    assert response.status_code == 400
    assert body["error_code"] == "COMPARE_LIMIT_REACHED"
    assert body["message"] == "Maximum 3 products allowed in compare list"

async def test_compare_list_keeps_insertion_order(client, user_headers, seed):
    products = await seed_products(seed, 2)
    for product in reversed(products):
        await client.post("/api/compare", headers=user_headers, json={"product_id": str(product.id)})

    listing = await client.get("/api/compare", headers=user_headers)

    names = [item["product"]["name"] for item in listing.json()["data"]["items"]]
    assert names == ["Sneaker 1", "Sneaker 0"]

async def test_comparison_matrix(client, user_headers, product, sale_product):
    for item in (product, sale_product):
        await client.post("/api/compare", headers=user_headers, json={"product_id": str(item.id)})

    response = await client.get("/api/compare/comparison", headers=user_headers)

    matrix = response.json()["data"]
    assert matrix["total"] == 2
    assert matrix["max_limit"] == 3
    assert matrix["sizes"] == ["M", "L", "S"]
    assert matrix["colors"] == ["white", "blue", "black"]
    assert matrix["price_range"] == {"min": 40.0, "max": 60.0}
    assert matrix["products"][0]["category"] == "Shirts"
    assert matrix["products"][0]["total_stock"] == 12

async def test_empty_comparison(client, user_headers):
    response = await client.get("/api/compare/comparison", headers=user_headers)

    body = response.json()
    assert body["message"] == "No products in compare list"
    assert body["data"]["products"] == []
    assert body["data"]["price_range"] is None

async def test_compare_remove_and_clear(client, user_headers, product, sale_product):
    for item in (product, sale_product):
        await client.post("/api/compare", headers=user_headers, json={"product_id": str(item.id)})

    removed = await client.delete(f"/api/compare/{product.id}", headers=user_headers)
    assert removed.json()["data"]["remaining_slots"] == 2

    cleared = await client.delete("/api/compare", headers=user_headers)
    assert cleared.json()["data"]["total"] == 0

async def test_deleting_product_removes_saved_entries(client, user_headers, admin_headers, sale_product):
    await client.post("/api/wishlist", headers=user_headers, json={"product_id": str(sale_product.id)})
    await client.post("/api/compare", headers=user_headers, json={"product_id": str(sale_product.id)})

    response = await client.delete(f"/api/products/{sale_product.id}", headers=admin_headers)
    assert response.status_code == 200

    assert (await client.get("/api/wishlist", headers=user_headers)).json()["data"]["total"] == 0
    assert (await client.get("/api/compare", headers=user_headers)).json()["data"]["total"] == 0
