from datetime import timedelta
from decimal import Decimal

from app.models import DiscountType
from app.models.base import utcnow
from tests.helpers import make_coupon, add_to_cart, SHIPPING_ADDRESS

def coupon_payload(**overrides):
    now = utcnow()
    payload = {
        "code": "spring20",
        "discount_type": "percentage",
        "discount_value": 20,
        "min_order_value": 50,
        "max_discount": 15,
        "start_date": (now - timedelta(hours=1)).isoformat(),
        "end_date": (now + timedelta(days=7)).isoformat(),
        "is_public": True,
    }
    payload.update(overrides)
    return payload

async def test_admin_creates_coupon_with_normalized_code(client, admin_headers):
    response = await client.post("/api/coupons", headers=admin_headers, json=coupon_payload())

    coupon = response.json()["data"]
    assert response.status_code == 201
    assert coupon["code"] == "SPRING20"
    assert coupon["discount_type"] == "PERCENTAGE"
    assert coupon["used_count"] == 0

async def test_customer_cannot_create_coupon(client, user_headers):
    response = await client.post("/api/coupons", headers=user_headers, json=coupon_payload())
    assert response.status_code == 403

async def test_invalid_coupon_reports_every_problem(client, admin_headers):
    now = utcnow()
    response = await client.post("/api/coupons", headers=admin_headers, json=coupon_payload(
        code="AB",
        discount_value=150,
        start_date=now.isoformat(),
        end_date=(now - timedelta(days=1)).isoformat(),
    ))

    body = response.json()
    assert response.status_code == 400
    assert body["message"] == "Validation failed"
    assert "Coupon code must be at least 3 characters long." in body["errors"]
    assert "Percentage discount cannot exceed 100%." in body["errors"]
    assert "End date must be after start date." in body["errors"]

async def test_unknown_discount_type_is_rejected(client, admin_headers):
    response = await client.post("/api/coupons", headers=admin_headers, json=coupon_payload(discount_type="BOGO"))
    assert response.status_code == 400
    assert "Invalid discount type. Must be PERCENTAGE or FIXED." in response.json()["errors"]

async def test_duplicate_code_conflicts(client, admin_headers, coupon):
    response = await client.post("/api/coupons", headers=admin_headers, json=coupon_payload(code="save10"))
    assert response.status_code == 409

async def test_update_is_validated_against_merged_values(client, admin_headers, coupon):
    response = await client.put(
        f"/api/coupons/{coupon.id}",
        headers=admin_headers,
        json={"end_date": (coupon.start_date - timedelta(days=1)).isoformat()}
    )
    assert response.status_code == 400
    assert response.json()["errors"] == ["End date must be after start date."]

    response = await client.put(f"/api/coupons/{coupon.id}", headers=admin_headers, json={"discount_value": 25})
    assert response.status_code == 200
    assert response.json()["data"]["discount_value"] == 25.0

async def test_list_filters_expired(client, admin_headers, coupon, seed):
    now = utcnow()
    await seed(make_coupon("OLD", start_date=now - timedelta(days=10), end_date=now - timedelta(days=1)))

    expired = await client.get("/api/coupons?expired=true", headers=admin_headers)
    current = await client.get("/api/coupons?expired=false", headers=admin_headers)

    assert [c["code"] for c in expired.json()["data"]["items"]] == ["OLD"]
    assert [c["code"] for c in current.json()["data"]["items"]] == ["SAVE10"]

async def test_public_listing_hides_private_and_unusable(client, seed):
    now = utcnow()
    await seed(
        make_coupon("VISIBLE"),
        make_coupon("PRIVATE", is_public=False),
        make_coupon("USEDUP", max_usage=1, used_count=1),
        make_coupon("LATER", start_date=now + timedelta(days=1)),
    )

    response = await client.get("/api/coupons/public")

    assert response.status_code == 200
    assert [c["code"] for c in response.json()["data"]] == ["VISIBLE"]

async def test_preview_caps_percentage_discount(client, user_headers, admin_headers):
    await client.post("/api/coupons", headers=admin_headers, json=coupon_payload())

    response = await client.post(
        "/api/coupons/apply",
        headers=user_headers,
        json={"code": "spring20", "total_amount": 200}
    )

    preview = response.json()["data"]
    assert response.status_code == 200
    assert preview["discount_amount"] == 15.0
    assert preview["final_amount"] == 185.0

async def test_validate_enforces_minimum_order_value(client, user_headers, coupon, seed):
    await seed(make_coupon("FIFTY", min_order_value=Decimal("50")))

    response = await client.post(
        "/api/coupons/validate",
        headers=user_headers,
        json={"code": "FIFTY", "total_amount": 20}
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Minimum order value of $50.00 is required."

async def test_preview_rejects_unusable_coupons(client, user_headers, seed):
    now = utcnow()
    await seed(
        make_coupon("OFF", is_active=False),
        make_coupon("EXPIRED", start_date=now - timedelta(days=5), end_date=now - timedelta(days=1)),
        make_coupon("SOON", start_date=now + timedelta(days=1)),
        make_coupon("GONE", max_usage=3, used_count=3),
    )

    expected = {
        "OFF": "This coupon is not active.",
        "EXPIRED": "This coupon has expired.",
        "SOON": "This coupon is not yet valid.",
        "GONE": "This coupon has reached its usage limit.",
    }
    for code, message in expected.items():
        response = await client.post(
            "/api/coupons/validate",
            headers=user_headers,
            json={"code": code, "total_amount": 100}
        )
        assert response.status_code == 400, code
        assert response.json()["message"] == message

async def test_fixed_discount_never_exceeds_amount(client, user_headers, seed):
    await seed(make_coupon("FLAT30", discount_type=DiscountType.FIXED, discount_value=Decimal("30")))

    response = await client.post(
        "/api/coupons/validate",
        headers=user_headers,
        json={"code": "FLAT30", "total_amount": 20}
    )

    assert response.json()["data"]["final_amount"] == 0.0

async def test_per_user_limit_counts_placed_orders(client, user_headers, product, seed):
    await seed(make_coupon("ONCE", max_usage_per_user=1))

    await add_to_cart(client, user_headers, product)
    await client.post("/api/cart/coupon", headers=user_headers, json={"coupon_code": "ONCE"})
    placed = await client.post("/api/orders", headers=user_headers, json={
        "payment_method": "card",
        "shipping_address": SHIPPING_ADDRESS,
    })
    assert placed.status_code == 201

    response = await client.post(
        "/api/coupons/validate",
        headers=user_headers,
        json={"code": "ONCE", "total_amount": 100}
    )
    assert response.status_code == 400
    assert response.json()["message"] == "You have already used this coupon the maximum number of times."

async def test_delete_detaches_coupon_from_carts(client, user_headers, admin_headers, product, coupon):
    await add_to_cart(client, user_headers, product, quantity=2)
    await client.post("/api/cart/coupon", headers=user_headers, json={"coupon_code": "SAVE10"})

    response = await client.delete(f"/api/coupons/{coupon.id}", headers=admin_headers)
    assert response.status_code == 200

    cart = (await client.get("/api/cart", headers=user_headers)).json()["data"]
    assert cart["coupon"] is None
    assert cart["discount_amount"] == 0
    assert cart["total"] == 98.0

async def test_delete_blocked_while_orders_are_open(client, user_headers, admin_headers, product, coupon):
    await add_to_cart(client, user_headers, product)
    await client.post("/api/cart/coupon", headers=user_headers, json={"coupon_code": "SAVE10"})
    await client.post("/api/orders", headers=user_headers, json={
        "payment_method": "card",
        "shipping_address": SHIPPING_ADDRESS,
    })

    response = await client.delete(f"/api/coupons/{coupon.id}", headers=admin_headers)

    assert response.status_code == 400
    assert "active orders" in response.json()["message"]
