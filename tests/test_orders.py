import pytest

from app.api.v1.orders.state_machine import OrderStateMachine
from app.models import OrderStatus
from tests.helpers import add_to_cart, variant_stock, SHIPPING_ADDRESS

async def place_order(client, headers, **body):
    payload = {"payment_method": "paypal", "shipping_address": SHIPPING_ADDRESS}
    payload.update(body)
    return await client.post("/api/orders", headers=headers, json=payload)

async def product_sold(client, product) -> int:
    response = await client.get(f"/api/products/{product.id}")
    return response.json()["data"]["sold"]

@pytest.mark.parametrize("current, target, allowed", [
    (OrderStatus.PENDING, OrderStatus.CONFIRMED, True),
    (OrderStatus.PENDING, OrderStatus.SHIPPED, False),
    (OrderStatus.PROCESSING, OrderStatus.CANCELLED, True),
    (OrderStatus.SHIPPED, OrderStatus.CANCELLED, False),
    (OrderStatus.SHIPPED, OrderStatus.DELIVERED, True),
    (OrderStatus.DELIVERED, OrderStatus.PENDING, False),
])
def test_state_machine_transitions(current, target, allowed):
    assert OrderStateMachine().can_transition(current, target) is allowed

def test_terminal_states():
    machine = OrderStateMachine()
    assert machine.is_terminal_state(OrderStatus.DELIVERED)
    assert machine.is_terminal_state(OrderStatus.CANCELLED)
    assert not machine.is_cancellable(OrderStatus.SHIPPED)
    assert machine.is_cancellable(OrderStatus.CONFIRMED)

async def test_order_copies_cart_and_empties_it(client, user_headers, product, coupon):
    await add_to_cart(client, user_headers, product, quantity=2)
    await client.post("/api/cart/coupon", headers=user_headers, json={"coupon_code": "SAVE10"})

    response = await place_order(client, user_headers, notes="Ring twice")

    order = response.json()["data"]
    assert response.status_code == 201
    assert order["order_number"].startswith("ORD-")
    assert order["status"] == "PENDING"
    assert order["payment_status"] == "PENDING"
    assert order["payment_method"] == "PAYPAL"
    assert order["items_price"] == 80.0
    assert order["tax_price"] == 8.0
    assert order["shipping_price"] == 10.0
    assert order["discount_amount"] == 8.0
    assert order["total_amount"] == 90.0
    assert order["coupon_id"] == str(coupon.id)
    assert order["shipping_address"]["full_name"] == "Jane Doe"
    assert order["notes"] == "Ring twice"
    assert order["items"][0]["quantity"] == 2
    assert [h["status"] for h in order["status_history"]] == ["PENDING"]

    cart = (await client.get("/api/cart", headers=user_headers)).json()["data"]
    assert cart["items"] == []
    assert cart["coupon"] is None
    assert cart["total"] == 0

    # stock was held by the cart, the order does not take it again
    assert await variant_stock(client, product) == 8
    assert await product_sold(client, product) == 2

async def test_order_increments_coupon_usage(client, user_headers, admin_headers, product, coupon):
    await add_to_cart(client, user_headers, product)
    await client.post("/api/cart/coupon", headers=user_headers, json={"coupon_code": "SAVE10"})
    await place_order(client, user_headers)

    response = await client.get(f"/api/coupons/{coupon.id}", headers=admin_headers)
    assert response.json()["data"]["used_count"] == 1

async def test_empty_cart_cannot_be_ordered(client, user_headers):
    response = await place_order(client, user_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Cart is empty or not found"

async def test_cart_shipping_address_is_used(client, user_headers, product):
    await add_to_cart(client, user_headers, product)
    await client.put("/api/cart/settings", headers=user_headers, json={
        "shipping_address": dict(SHIPPING_ADDRESS, city="Shelbyville"),
    })

    response = await client.post("/api/orders", headers=user_headers, json={"payment_method": "cod"})

    assert response.status_code == 201
    assert response.json()["data"]["shipping_address"]["city"] == "Shelbyville"

async def test_saved_address_is_the_fallback(client, user_headers, product):
    await client.put("/api/profile", headers=user_headers, json={"address": {
        "full_name": "Jane Doe",
        "phone": "+1 555 123 4567",
        "address_line_one": "1 Elm Street",
        "city": "Ogdenville",
        "country": "US",
    }})
    await add_to_cart(client, user_headers, product)

    response = await client.post("/api/orders", headers=user_headers, json={"payment_method": "cod"})

    address = response.json()["data"]["shipping_address"]
    assert response.status_code == 201
    assert address["city"] == "Ogdenville"
    assert address["address"] == "1 Elm Street"

async def test_missing_address_is_rejected(client, user_headers, product):
    await add_to_cart(client, user_headers, product)

    response = await client.post("/api/orders", headers=user_headers, json={"payment_method": "cod"})

    assert response.status_code == 400
    assert response.json()["message"] == "Shipping address is required"

async def test_orders_are_private(client, user_headers, other_headers, admin_headers, product):
    await add_to_cart(client, user_headers, product)
    order_id = (await place_order(client, user_headers)).json()["data"]["id"]

    assert (await client.get(f"/api/orders/{order_id}", headers=user_headers)).status_code == 200
    assert (await client.get(f"/api/orders/{order_id}", headers=other_headers)).status_code == 403

    as_admin = await client.get(f"/api/orders/{order_id}", headers=admin_headers)
    assert as_admin.status_code == 200
    assert "admin_notes" in as_admin.json()["data"]

    own = await client.get("/api/orders", headers=other_headers)
    assert own.json()["data"]["total"] == 0

async def test_admin_lists_all_orders(client, user_headers, other_headers, admin_headers, product):
    await add_to_cart(client, user_headers, product)
    await place_order(client, user_headers)
    await add_to_cart(client, other_headers, product)
    await place_order(client, other_headers)

    response = await client.get("/api/orders/admin/all", headers=admin_headers)
    assert response.json()["data"]["total"] == 2

    forbidden = await client.get("/api/orders/admin/all", headers=user_headers)
    assert forbidden.status_code == 403

async def test_public_tracking_by_order_number(client, user_headers, product):
    await add_to_cart(client, user_headers, product)
    number = (await place_order(client, user_headers)).json()["data"]["order_number"]

    response = await client.get(f"/api/orders/track/{number}")

    tracking = response.json()["data"]
    assert response.status_code == 200
    assert tracking["status"] == "PENDING"
    assert tracking["items"][0]["product_name"] == "Linen Shirt"
    assert "shipping_address" not in tracking

async def test_cancel_returns_stock_and_usage(client, user_headers, admin_headers, product, coupon):
    await add_to_cart(client, user_headers, product, quantity=3)
    await client.post("/api/cart/coupon", headers=user_headers, json={"coupon_code": "SAVE10"})
    order_id = (await place_order(client, user_headers)).json()["data"]["id"]

    response = await client.put(
        f"/api/orders/{order_id}/cancel",
        headers=user_headers,
        json={"reason": "Changed my mind"}
    )

    order = response.json()["data"]
    assert response.status_code == 200
    assert order["status"] == "CANCELLED"
    assert order["payment_status"] == "FAILED"
    assert order["cancellation_reason"] == "Changed my mind"
    assert order["cancelled_at"] is not None
    assert [h["status"] for h in order["status_history"]] == ["PENDING", "CANCELLED"]

    assert await variant_stock(client, product) == 10
    assert await product_sold(client, product) == 0

    coupon_detail = await client.get(f"/api/coupons/{coupon.id}", headers=admin_headers)
    assert coupon_detail.json()["data"]["used_count"] == 0

async def test_cancel_without_body(client, user_headers, product):
    await add_to_cart(client, user_headers, product)
    order_id = (await place_order(client, user_headers)).json()["data"]["id"]

    response = await client.put(f"/api/orders/{order_id}/cancel", headers=user_headers)

    assert response.status_code == 200
    assert response.json()["data"]["cancellation_reason"] == "Order cancelled"

async def test_shipped_order_cannot_be_cancelled(client, user_headers, admin_headers, product):
    await add_to_cart(client, user_headers, product)
    order_id = (await place_order(client, user_headers)).json()["data"]["id"]

    for status in ("CONFIRMED", "PROCESSING", "SHIPPED"):
        response = await client.put(f"/api/orders/{order_id}/status", headers=admin_headers, json={"status": status})
        assert response.status_code == 200

    response = await client.put(f"/api/orders/{order_id}/cancel", headers=user_headers)

    assert response.status_code == 400
    assert response.json()["error_code"] == "ORDER_NOT_CANCELLABLE"

async def test_other_user_cannot_cancel(client, user_headers, other_headers, product):
    await add_to_cart(client, user_headers, product)
    order_id = (await place_order(client, user_headers)).json()["data"]["id"]

    response = await client.put(f"/api/orders/{order_id}/cancel", headers=other_headers)
    assert response.status_code == 403

async def test_admin_status_update_follows_state_machine(client, user_headers, admin_headers, product):
    await add_to_cart(client, user_headers, product)
    order_id = (await place_order(client, user_headers)).json()["data"]["id"]

    skipped = await client.put(f"/api/orders/{order_id}/status", headers=admin_headers, json={"status": "DELIVERED"})
    assert skipped.status_code == 400
    assert skipped.json()["errors"] == ["Allowed next statuses: CONFIRMED, CANCELLED"]

    confirmed = await client.put(f"/api/orders/{order_id}/status", headers=admin_headers, json={
        "status": "CONFIRMED",
        "payment_status": "COMPLETED",
        "admin_notes": "Paid by card",
    })
    order = confirmed.json()["data"]
    assert order["status"] == "CONFIRMED"
    assert order["payment_status"] == "COMPLETED"
    assert order["admin_notes"] == "Paid by card"

async def test_admin_cancel_of_paid_order_refunds(client, user_headers, admin_headers, product):
    await add_to_cart(client, user_headers, product, quantity=2)
    order_id = (await place_order(client, user_headers)).json()["data"]["id"]
    await client.put(f"/api/orders/{order_id}/status", headers=admin_headers, json={"payment_status": "COMPLETED"})

    response = await client.put(f"/api/orders/{order_id}/status", headers=admin_headers, json={
        "status": "CANCELLED",
        "reason": "Out of stock at warehouse",
    })

    order = response.json()["data"]
    assert order["status"] == "CANCELLED"
    assert order["payment_status"] == "REFUNDED"
    assert await variant_stock(client, product) == 10

async def test_delivery_sets_timestamp(client, user_headers, admin_headers, product):
    await add_to_cart(client, user_headers, product)
    order_id = (await place_order(client, user_headers)).json()["data"]["id"]

    for status in ("CONFIRMED", "PROCESSING", "SHIPPED", "DELIVERED"):
        response = await client.put(f"/api/orders/{order_id}/status", headers=admin_headers, json={"status": status})

    order = response.json()["data"]
    assert order["status"] == "DELIVERED"
    assert order["delivered_at"] is not None
    assert len(order["status_history"]) == 5

async def test_customer_cannot_change_status(client, user_headers, product):
    await add_to_cart(client, user_headers, product)
    order_id = (await place_order(client, user_headers)).json()["data"]["id"]

    response = await client.put(f"/api/orders/{order_id}/status", headers=user_headers, json={"status": "CONFIRMED"})
    assert response.status_code == 403
