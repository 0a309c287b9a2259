ADDRESS = {
    "full_name": "Jane Doe",
    "phone": "+1 (555) 123-4567",
    "address_line_one": "12 Market Street",
    "city": "Springfield",
    "zip_code": "12345",
    "country": "US",
}

async def test_get_profile(client, user, user_headers):
    response = await client.get("/api/profile", headers=user_headers)

    profile = response.json()["data"]
    assert response.status_code == 200
    assert profile["email"] == user.email
    assert profile["address"] is None

async def test_update_profile_creates_address(client, user_headers):
    response = await client.put("/api/profile", headers=user_headers, json={
        "name": "Jane Doe",
        "username": "janed",
        "gender": "FEMALE",
        "address": ADDRESS,
    })

    profile = response.json()["data"]
    assert response.status_code == 200
    assert profile["username"] == "janed"
    assert profile["address"]["phone"] == "+15551234567"
    assert profile["address"]["address_type"] == "HOME"

async def test_partial_address_update(client, user_headers):
    await client.put("/api/profile", headers=user_headers, json={"address": ADDRESS})

    response = await client.put("/api/profile", headers=user_headers, json={"address": {"city": "Shelbyville"}})

    address = response.json()["data"]["address"]
    assert address["city"] == "Shelbyville"
    assert address["address_line_one"] == "12 Market Street"

async def test_new_address_needs_required_fields(client, user_headers):
    response = await client.put("/api/profile", headers=user_headers, json={"address": {"city": "Springfield"}})

    body = response.json()
    assert response.status_code == 400
    assert "Phone number is required" in body["errors"]
    assert "Country is required" in body["errors"]

async def test_profile_errors_are_collected(client, user_headers):
    response = await client.put("/api/profile", headers=user_headers, json={
        "name": "J",
        "birth_date": "2999-01-01",
        "address": dict(ADDRESS, phone="call me", address_line_one="abc"),
    })

    errors = response.json()["errors"]
    assert response.status_code == 400
    assert "Name must be at least 2 characters" in errors
    assert "Birth date is not valid" in errors
    assert "Phone number is not valid" in errors
    assert "Address must be more than 5 characters" in errors

async def test_username_must_be_unique(client, user_headers, other_headers):
    await client.put("/api/profile", headers=other_headers, json={"username": "taken"})

    response = await client.put("/api/profile", headers=user_headers, json={"username": "taken"})
    assert response.status_code == 409

async def test_banners_are_public_and_admin_managed(client, admin_headers, user_headers):
    payload = {"title": "Summer sale", "image_url": "https://cdn.example.com/summer.jpg", "type": "PROMO"}

    forbidden = await client.post("/api/banners", headers=user_headers, json=payload)
    assert forbidden.status_code == 403

    created = await client.post("/api/banners", headers=admin_headers, json=payload)
    banner = created.json()["data"]
    assert created.status_code == 201
    assert banner["type"] == "PROMO"

    hidden = await client.put(f"/api/banners/{banner['id']}", headers=admin_headers, json={"is_active": False})
    assert hidden.json()["data"]["is_active"] is False

    assert len((await client.get("/api/banners")).json()["data"]) == 1
    assert (await client.get("/api/banners?active_only=true")).json()["data"] == []

    deleted = await client.delete(f"/api/banners/{banner['id']}", headers=admin_headers)
    assert deleted.status_code == 200
    assert (await client.delete(f"/api/banners/{banner['id']}", headers=admin_headers)).status_code == 404

async def test_banner_title_length(client, admin_headers):
    response = await client.post("/api/banners", headers=admin_headers, json={
        "title": "Hi",
        "image_url": "https://cdn.example.com/x.jpg",
    })
    assert response.status_code == 422

async def test_health(client):
    response = await client.get("/health")
    assert response.json()["status"] == "healthy"
