from conftest import make_user


def test_root(client):
    assert client.get("/").json() == {"message": "Store API is running"}


def test_translations_endpoint(client):
    body = client.get("/i18n/en").json()
    assert body["lang"] == "en"
    assert body["rtl"] is False
    assert body["strings"]["cart.title"] == "Shopping Cart"


def test_seed_populates_store(client, db):
    resp = client.post("/seed", json={})
    assert resp.status_code == 200
    assert resp.json()["seeded"] == 9
    assert db["category"].count_documents({}) == 5
    assert db["order"].count_documents({}) == 3

    again = client.post("/seed", json={})
    assert again.json()["message"] == "Already seeded"

    login = client.post("/auth/login", json={"email": "admin@ecommerce.com", "password": "password123"})
    assert login.status_code == 200
    assert login.json()["redirectTo"] == "/admin"

    orders = client.get("/orders", headers={"Authorization": f"Bearer {login.json()['accessToken']}"}).json()
    assert {o["orderNumber"] for o in orders} == {"ORD-001", "ORD-002", "ORD-003"}


def test_next_order_after_seed_gets_fresh_number(client, db):
    client.post("/seed", json={})
    product = client.get("/products").json()[0]
    resp = client.post("/orders/guest", json={
        "customerName": "Guest",
        "customerEmail": "g@example.com",
        "shippingAddress": "Somewhere",
        "items": [{"productId": product["id"], "quantity": 1}],
    })
    assert resp.status_code == 200
    assert resp.json()["orderNumber"] == "ORD-004"


def test_client_config_exposes_storage_keys_and_store_rules(client):
    body = client.get("/client-config").json()
    assert body["storageKeys"]["token"] == "accessToken"
    assert body["storageKeys"]["language"] == "lang"
    assert body["taxRate"] == 0.08
    assert body["freeShippingThreshold"] == 50
    assert body["shippingFee"] == 9.99


def test_database_status(client):
    body = client.get("/test").json()
    assert body["backend"] == "✅ Running"
    assert body["database"] == "✅ Connected & Working"
    assert "user" in body["collections"]


def test_seed_leaves_a_live_store_alone(client, db):
    make_user("real@customer.com")
    resp = client.post("/seed", json={})
    assert resp.status_code == 200
    assert resp.json()["message"] == "Already seeded"
    assert db["user"].count_documents({"email": "real@customer.com"}) == 1
    assert db["product"].count_documents({}) == 0


def test_forced_reseed_requires_admin(client, db, customer_headers):
    assert client.post("/seed", json={"force": True}).status_code == 403
    assert client.post("/seed", json={"force": True}, headers=customer_headers).status_code == 403
    assert db["user"].count_documents({"email": "client@example.com"}) == 1


def test_admin_can_force_reseed(client, db, admin_headers, make_product):
    make_product(name="Leftover")
    resp = client.post("/seed", json={"force": True}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["seeded"] == 9
    assert db["product"].count_documents({"name": "Leftover"}) == 0
    assert db["user"].count_documents({"email": "admin@example.com"}) == 0
