import os

# Cheap hashes for tests; must be set before config is imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.pop("DATABASE_URL", None)

import mongomock
import pytest
from fastapi.testclient import TestClient

import database
from database import create_document, find_by_id
from main import app
from security import create_access_token, hash_password


@pytest.fixture
def db():
    previous = database.db
    mock_db = mongomock.MongoClient()["store_test"]
    database.set_database(mock_db)
    database.ensure_indexes()
    yield mock_db
    database.set_database(previous)


@pytest.fixture
def client(db):
    return TestClient(app)


def make_user(email, role="CLIENT", password="password123", name="Test User"):
    user_id = create_document("user", {
        "email": email,
        "name": name,
        "role": role,
        "password_hash": hash_password(password),
        "joined_at": database.now(),
    })
    return find_by_id("user", user_id)


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def admin(db):
    return make_user("admin@example.com", role="ADMIN", name="Admin")


@pytest.fixture
def customer(db):
    return make_user("client@example.com", name="Client")


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def customer_headers(customer):
    return auth_headers(customer)


@pytest.fixture
def category(client, admin_headers):
    resp = client.post("/categories", json={
        "name": "Electronics",
        "nameEn": "Electronics",
        "nameAr": "إلكترونيات",
    }, headers=admin_headers)
    assert resp.status_code == 200
    return resp.json()


@pytest.fixture
def make_product(client, admin_headers):
    def _make(name="Wireless Headphones", price=199.99, stock=10, category_id=None, **extra):
        body = {
            "name": name,
            "price": price,
            "description": f"{name} description",
            "image": "https://example.com/p.jpg",
            "stock": stock,
            "categoryId": category_id,
        }
        body.update(extra)
        resp = client.post("/products", json=body, headers=admin_headers)
        assert resp.status_code == 200, resp.text
        return resp.json()
    return _make
