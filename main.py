import logging
import os
from contextlib import asynccontextmanager
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId
from fastapi import Depends, FastAPI, Header, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

import database
from config import (
    CORS_ORIGINS,
    DEFAULT_LANGUAGE,
    FREE_SHIPPING_THRESHOLD,
    LOG_LEVEL,
    LOW_STOCK_THRESHOLD,
    PORT,
    SHIPPING_FEE,
    STORAGE_KEYS,
    TAX_RATE,
)
from database import (
    create_document,
    ensure_indexes,
    find_by_id,
    get_db,
    get_documents,
    now,
    oid,
    to_str_id,
    update_document,
)
from i18n import catalog, format_price, localize_category, localize_product, resolve_language
from schemas import (
    AddToCartInput,
    AuthPayload,
    CartItemOut,
    CartOut,
    CategoryOut,
    CreateCategoryInput,
    CreateOrderInput,
    CreateProductInput,
    CreateUserInput,
    Dashboard,
    LoginInput,
    OrderOut,
    OrderStats,
    OrderStatus,
    PriceRange,
    ProductOut,
    RegisterInput,
    Role,
    SeedRequest,
    UpdateCartItemInput,
    UpdateOrderStatusInput,
    UpdateProductInput,
    UpdateStockInput,
    UpdateUserInput,
    UserOut,
)
from security import (
    create_access_token,
    get_current_user,
    hash_password,
    is_admin,
    optional_user,
    redirect_after_login,
    require_admin,
    verify_password,
)
from storefront import cart_totals, filter_products, low_stock, next_order_number

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    ensure_indexes()
    yield


app = FastAPI(title="Bilingual Store API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


@app.exception_handler(PyMongoError)
async def storage_error_handler(request, exc: PyMongoError):
    logger.error("Storage error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


# ---------- Helpers ----------

def _language(lang: Optional[str], accept_language: Optional[str]) -> Optional[str]:
    # Only localize when the caller asked for a language
    if lang is None and accept_language is None:
        return None
    return resolve_language(lang, accept_language)


def _user_out(doc: Dict[str, Any]) -> Dict[str, Any]:
    user = to_str_id(doc)
    user.pop("password_hash", None)
    user.setdefault("joined_at", user.get("created_at"))
    return user


def _category_map() -> Dict[str, Dict[str, Any]]:
    return {str(c["_id"]): to_str_id(c) for c in get_documents("category")}


def _get_category(category_id: str) -> Dict[str, Any]:
    doc = find_by_id("category", category_id)
    if not doc:
        raise HTTPException(status_code=404, detail=f"Category with ID {category_id} not found")
    return doc


def _category_out(doc: Dict[str, Any], lang: Optional[str] = None) -> Dict[str, Any]:
    category = to_str_id(doc)
    category["_count"] = {"products": get_db()["product"].count_documents({"category_id": category["id"]})}
    if lang:
        category = localize_category(category, lang)
    return category


def _product_out(doc: Dict[str, Any], categories: Dict[str, Dict[str, Any]], lang: Optional[str] = None) -> Dict[str, Any]:
    product = to_str_id(doc)
    product["category"] = categories.get(product.get("category_id") or "")
    if lang:
        product = localize_product(product, lang)
        product["price_display"] = format_price(product["price"], lang)
    return product


def _get_product(product_id: str) -> Dict[str, Any]:
    doc = find_by_id("product", product_id)
    if not doc:
        raise HTTPException(status_code=404, detail=f"Product with ID {product_id} not found")
    return doc


def _products_by_id(ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
    object_ids = [ObjectId(i) for i in set(ids) if i and ObjectId.is_valid(i)]
    if not object_ids:
        return {}
    return {str(p["_id"]): p for p in get_documents("product", {"_id": {"$in": object_ids}})}


def _cart_item_out(doc: Dict[str, Any], product: Optional[Dict[str, Any]], categories: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    item = to_str_id(doc)
    item["product"] = _product_out(product, categories) if product else None
    return item


def _orders_out(docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    products = _products_by_id(it["product_id"] for d in docs for it in d.get("items", []))
    categories = _category_map() if products else {}
    user_ids = [ObjectId(d["user_id"]) for d in docs if d.get("user_id") and ObjectId.is_valid(d["user_id"])]
    users = {str(u["_id"]): _user_out(u) for u in get_documents("user", {"_id": {"$in": user_ids}})} if user_ids else {}

    result = []
    for d in docs:
        order = to_str_id(d)
        order["user"] = users.get(order.get("user_id") or "")
        items = []
        for it in order.get("items", []):
            line = dict(it)
            product = products.get(it["product_id"])
            line["product"] = _product_out(product, categories) if product else None
            items.append(line)
        order["items"] = items
        result.append(order)
    return result


def _get_order(order_id: str) -> Dict[str, Any]:
    doc = find_by_id("order", order_id)
    if not doc:
        raise HTTPException(status_code=404, detail=f"Order with ID {order_id} not found")
    return doc


def _changes(payload, nullable: Iterable[str] = ()) -> Dict[str, Any]:
    """Fields the caller sent. An explicit null only clears a nullable field."""
    nullable = set(nullable)
    return {
        k: v for k, v in payload.model_dump(exclude_unset=True).items()
        if v is not None or k in nullable
    }


def _auth_payload(user: Dict[str, Any], next_path: Optional[str] = None) -> Dict[str, Any]:
    return {
        "access_token": create_access_token(user),
        "user": _user_out(user),
        "redirect_to": redirect_after_login(user["role"], next_path),
    }


def _insert_user(data: Dict[str, Any]) -> Dict[str, Any]:
    email = data["email"].lower()
    if get_db()["user"].find_one({"email": email}):
        raise HTTPException(status_code=409, detail="User with this email already exists")
    record = {
        "email": email,
        "password_hash": hash_password(data.pop("password")),
        "name": data["name"],
        "name_en": data.get("name_en"),
        "avatar": data.get("avatar"),
        "role": data.get("role", Role.CLIENT.value),
        "joined_at": now(),
    }
    try:
        user_id = create_document("user", record)
    except DuplicateKeyError:
        raise HTTPException(status_code=409, detail="User with this email already exists")
    return find_by_id("user", user_id)


# ---------- Health ----------

@app.get("/")
def read_root():
    return {"message": "Store API is running"}


@app.get("/test")
def test_database():
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "database_url": "✅ Set" if os.getenv("DATABASE_URL") else "❌ Not Set",
        "database_name": "✅ Set" if os.getenv("DATABASE_NAME") else "❌ Not Set",
        "collections": [],
    }
    try:
        if database.db is not None:
            response["collections"] = database.db.list_collection_names()[:10]
            response["database"] = "✅ Connected & Working"
    except Exception as e:
        response["database"] = f"⚠️  Connected but Error: {str(e)[:50]}"
    return response


@app.get("/i18n/{lang}")
def translations(lang: str):
    return catalog(lang)


@app.get("/client-config")
def client_config():
    return {
        "storageKeys": STORAGE_KEYS,
        "defaultLanguage": DEFAULT_LANGUAGE,
        "taxRate": TAX_RATE,
        "freeShippingThreshold": FREE_SHIPPING_THRESHOLD,
        "shippingFee": SHIPPING_FEE,
        "lowStockThreshold": LOW_STOCK_THRESHOLD,
    }


# ---------- Auth ----------

@app.post("/auth/register", response_model=AuthPayload)
def register(payload: RegisterInput):
    data = payload.model_dump()
    data["role"] = Role.CLIENT.value
    user = _insert_user(data)
    logger.info("Registered new client %s", user["email"])
    return _auth_payload(user)


@app.post("/auth/login", response_model=AuthPayload)
def login(payload: LoginInput):
    user = get_db()["user"].find_one({"email": payload.email.lower()})
    if not user or not verify_password(payload.password, user.get("password_hash", "")):
        logger.info("Failed login for %s", payload.email)
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return _auth_payload(user, payload.next)


@app.get("/auth/me", response_model=UserOut)
def me(user: Dict[str, Any] = Depends(get_current_user)):
    return _user_out(user)


# ---------- Users ----------

@app.get("/users", response_model=List[UserOut], dependencies=[Depends(require_admin)])
def list_users():
    return [_user_out(u) for u in get_documents("user", sort=[("joined_at", -1)])]


@app.get("/users/{user_id}", response_model=UserOut, dependencies=[Depends(get_current_user)])
def get_user(user_id: str):
    doc = find_by_id("user", user_id)
    if not doc:
        raise HTTPException(status_code=404, detail=f"User with ID {user_id} not found")
    return _user_out(doc)


@app.post("/users", response_model=UserOut, dependencies=[Depends(require_admin)])
def create_user(payload: CreateUserInput):
    data = payload.model_dump()
    data["role"] = payload.role.value
    user = _insert_user(data)
    logger.info("Admin created user %s with role %s", user["email"], user["role"])
    return _user_out(user)


@app.patch("/users/{user_id}", response_model=UserOut)
def update_user(user_id: str, payload: UpdateUserInput, current: Dict[str, Any] = Depends(get_current_user)):
    if str(current["_id"]) != user_id and not is_admin(current):
        raise HTTPException(status_code=403, detail="Not allowed to update this user")
    if not find_by_id("user", user_id):
        raise HTTPException(status_code=404, detail=f"User with ID {user_id} not found")

    changes = _changes(payload, nullable=("name_en", "avatar"))
    if "role" in changes:
        if not is_admin(current):
            raise HTTPException(status_code=403, detail="Only admins can change roles")
        changes["role"] = changes["role"].value
    if "email" in changes:
        changes["email"] = changes["email"].lower()
        clash = get_db()["user"].find_one({"email": changes["email"], "_id": {"$ne": oid(user_id)}})
        if clash:
            raise HTTPException(status_code=409, detail="User with this email already exists")
    if changes.get("password"):
        changes["password_hash"] = hash_password(changes.pop("password"))
    changes.pop("password", None)

    return _user_out(update_document("user", user_id, changes))


@app.delete("/users/{user_id}", response_model=UserOut, dependencies=[Depends(require_admin)])
def remove_user(user_id: str):
    doc = find_by_id("user", user_id)
    if not doc:
        raise HTTPException(status_code=404, detail=f"User with ID {user_id} not found")
    db = get_db()
    db["cart_item"].delete_many({"user_id": user_id})
    # Orders survive their customer; they keep the contact snapshot
    db["order"].update_many({"user_id": user_id}, {"$set": {"user_id": None, "updated_at": now()}})
    db["user"].delete_one({"_id": doc["_id"]})
    logger.info("Removed user %s", doc["email"])
    return _user_out(doc)


# ---------- Categories ----------

@app.get("/categories", response_model=List[CategoryOut])
def list_categories(lang: Optional[str] = None, accept_language: Optional[str] = Header(None)):
    language = _language(lang, accept_language)
    return [_category_out(c, language) for c in get_documents("category", sort=[("name", 1)])]


@app.get("/categories/{category_id}", response_model=CategoryOut)
def get_category(category_id: str, lang: Optional[str] = None, accept_language: Optional[str] = Header(None)):
    return _category_out(_get_category(category_id), _language(lang, accept_language))


@app.post("/categories", response_model=CategoryOut, dependencies=[Depends(require_admin)])
def create_category(payload: CreateCategoryInput):
    category_id = create_document("category", payload.model_dump())
    logger.info("Created category %s", payload.name)
    return _category_out(find_by_id("category", category_id))


@app.delete("/categories/{category_id}", response_model=CategoryOut, dependencies=[Depends(require_admin)])
def remove_category(category_id: str):
    doc = _get_category(category_id)
    db = get_db()
    detached = db["product"].update_many(
        {"category_id": category_id},
        {"$set": {"category_id": None, "updated_at": now()}},
    )
    db["category"].delete_one({"_id": doc["_id"]})
    logger.info("Removed category %s, detached %d products", doc["name"], detached.modified_count)
    category = to_str_id(doc)
    category["_count"] = {"products": 0}
    return category


# ---------- Products ----------

@app.get("/products", response_model=List[ProductOut])
def list_products(
    category_id: Optional[str] = Query(None, alias="categoryId"),
    featured: Optional[bool] = None,
    active: Optional[bool] = None,
    search: Optional[str] = None,
    price_range: PriceRange = Query(PriceRange.ALL, alias="priceRange"),
    sort: Optional[str] = Query(None, description="newest|price_asc|price_desc"),
    lang: Optional[str] = None,
    accept_language: Optional[str] = Header(None),
):
    filt: Dict[str, Any] = {}
    if featured is not None:
        filt["featured"] = featured
    if active is not None:
        filt["active"] = active

    if sort == "price_asc":
        order = [("price", 1)]
    elif sort == "price_desc":
        order = [("price", -1)]
    else:
        order = [("created_at", -1)]

    docs = filter_products(get_documents("product", filt, sort=order), search, category_id, price_range.value)
    categories = _category_map()
    language = _language(lang, accept_language)
    return [_product_out(d, categories, language) for d in docs]


@app.get("/products/{product_id}", response_model=ProductOut)
def get_product(product_id: str, lang: Optional[str] = None, accept_language: Optional[str] = Header(None)):
    return _product_out(_get_product(product_id), _category_map(), _language(lang, accept_language))


@app.post("/products", response_model=ProductOut, dependencies=[Depends(require_admin)])
def create_product(payload: CreateProductInput):
    if payload.category_id:
        _get_category(payload.category_id)
    product_id = create_document("product", payload.model_dump())
    logger.info("Created product %s", payload.name)
    return _product_out(find_by_id("product", product_id), _category_map())


@app.patch("/products/{product_id}", response_model=ProductOut, dependencies=[Depends(require_admin)])
def update_product(product_id: str, payload: UpdateProductInput):
    _get_product(product_id)
    changes = _changes(payload, nullable=("name_en", "name_ar", "description_en", "description_ar", "category_id"))
    if changes.get("category_id"):
        _get_category(changes["category_id"])
    return _product_out(update_document("product", product_id, changes), _category_map())


@app.delete("/products/{product_id}", response_model=ProductOut, dependencies=[Depends(require_admin)])
def remove_product(product_id: str):
    doc = _get_product(product_id)
    db = get_db()
    db["cart_item"].delete_many({"product_id": product_id})
    db["product"].delete_one({"_id": doc["_id"]})
    logger.info("Removed product %s", doc["name"])
    return _product_out(doc, _category_map())


@app.patch("/products/{product_id}/stock", response_model=ProductOut, dependencies=[Depends(require_admin)])
def update_stock(product_id: str, payload: UpdateStockInput):
    product = _get_product(product_id)
    new_stock = int(product.get("stock", 0)) + payload.quantity
    if new_stock < 0:
        raise HTTPException(status_code=400, detail="Insufficient stock")
    return _product_out(update_document("product", product_id, {"stock": new_stock}), _category_map())


# ---------- Cart ----------

def _get_own_cart_item(cart_item_id: str, user: Dict[str, Any]) -> Dict[str, Any]:
    item = find_by_id("cart_item", cart_item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Cart item not found")
    if item["user_id"] != str(user["_id"]):
        raise HTTPException(status_code=403, detail="Not allowed to change this cart item")
    return item


@app.get("/cart", response_model=CartOut)
def get_cart(user: Dict[str, Any] = Depends(get_current_user)):
    rows = get_documents("cart_item", {"user_id": str(user["_id"])}, sort=[("created_at", -1)])
    products = _products_by_id(r["product_id"] for r in rows)
    categories = _category_map()

    items = []
    lines = []
    for row in rows:
        product = products.get(row["product_id"])
        items.append(_cart_item_out(row, product, categories))
        if product:
            lines.append((product["price"], row["quantity"]))

    cart = cart_totals(lines)
    cart["items"] = items
    return cart


@app.post("/cart", response_model=CartItemOut)
def add_to_cart(payload: AddToCartInput, user: Dict[str, Any] = Depends(get_current_user)):
    product = _get_product(payload.product_id)
    if product.get("stock", 0) < payload.quantity:
        raise HTTPException(status_code=400, detail="Not enough stock available")

    user_id = str(user["_id"])
    key = {"user_id": user_id, "product_id": payload.product_id}
    cart_col = get_db()["cart_item"]
    if not cart_col.find_one(key):
        try:
            item_id = create_document("cart_item", dict(key, quantity=payload.quantity))
            return _cart_item_out(find_by_id("cart_item", item_id), product, _category_map())
        except DuplicateKeyError:
            # A concurrent add created the row first; fall through to increment it
            logger.info("Cart row for %s/%s already exists, incrementing", user_id, payload.product_id)

    # The guard keeps the accumulated quantity within stock
    doc = cart_col.find_one_and_update(
        dict(key, quantity={"$lte": product.get("stock", 0) - payload.quantity}),
        {"$inc": {"quantity": payload.quantity}, "$set": {"updated_at": now()}},
        return_document=ReturnDocument.AFTER,
    )
    if doc is None:
        raise HTTPException(status_code=400, detail="Not enough stock available")
    return _cart_item_out(doc, product, _category_map())


@app.patch("/cart/{cart_item_id}", response_model=CartItemOut)
def update_cart_item(cart_item_id: str, payload: UpdateCartItemInput, user: Dict[str, Any] = Depends(get_current_user)):
    item = _get_own_cart_item(cart_item_id, user)
    product = _get_product(item["product_id"])
    if product.get("stock", 0) < payload.quantity:
        raise HTTPException(status_code=400, detail="Not enough stock available")
    doc = update_document("cart_item", cart_item_id, {"quantity": payload.quantity})
    return _cart_item_out(doc, product, _category_map())


@app.delete("/cart/{cart_item_id}", response_model=CartItemOut)
def remove_from_cart(cart_item_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    item = _get_own_cart_item(cart_item_id, user)
    get_db()["cart_item"].delete_one({"_id": item["_id"]})
    return _cart_item_out(item, find_by_id("product", item["product_id"]), _category_map())


@app.delete("/cart")
def clear_cart(user: Dict[str, Any] = Depends(get_current_user)) -> bool:
    get_db()["cart_item"].delete_many({"user_id": str(user["_id"])})
    return True


# ---------- Orders ----------

def _reserve_stock(quantities: Dict[str, int]) -> None:
    """Atomically take stock for every product or for none of them."""
    products = get_db()["product"]
    taken = []
    for product_id, quantity in quantities.items():
        result = products.update_one(
            {"_id": ObjectId(product_id), "stock": {"$gte": quantity}},
            {"$inc": {"stock": -quantity}, "$set": {"updated_at": now()}},
        )
        if result.modified_count == 0:
            _release_stock(dict(taken))
            raise HTTPException(status_code=400, detail="Not enough stock available")
        taken.append((product_id, quantity))


def _release_stock(quantities: Dict[str, int]) -> None:
    products = get_db()["product"]
    for product_id, quantity in quantities.items():
        products.update_one({"_id": ObjectId(product_id)}, {"$inc": {"stock": quantity}})


def _place_order(user: Optional[Dict[str, Any]], payload: CreateOrderInput) -> Dict[str, Any]:
    # Repeated lines for one product are checked against stock together
    quantities: Dict[str, int] = {}
    for item in payload.items:
        quantities[item.product_id] = quantities.get(item.product_id, 0) + item.quantity

    products: Dict[str, Dict[str, Any]] = {}
    for product_id, quantity in quantities.items():
        product = _get_product(product_id)
        if product.get("stock", 0) < quantity:
            raise HTTPException(status_code=400, detail=f"Not enough stock for product {product['name']}")
        products[product_id] = product

    stamp = now()
    items = [
        {
            "id": str(ObjectId()),
            "product_id": item.product_id,
            "quantity": item.quantity,
            "price": float(products[item.product_id]["price"]),
            "created_at": stamp,
        }
        for item in payload.items
    ]
    totals = cart_totals((it["price"], it["quantity"]) for it in items)
    totals.pop("item_count")

    _reserve_stock(quantities)

    user_id = str(user["_id"]) if user else None
    order = {
        "customer_name": payload.customer_name,
        "customer_email": payload.customer_email,
        "shipping_address": payload.shipping_address,
        "phone_number": payload.phone_number,
        "notes": payload.notes,
        "status": OrderStatus.PENDING.value,
        "user_id": user_id,
        "items": items,
        **totals,
    }

    orders = get_db()["order"]
    order_id = None
    attempts = 0
    while order_id is None:
        order["order_number"] = next_order_number(orders.count_documents({}) + attempts)
        try:
            order_id = create_document("order", dict(order))
        except DuplicateKeyError:
            attempts += 1
            if attempts >= 5:
                _release_stock(quantities)
                raise HTTPException(status_code=409, detail="Could not allocate an order number, please retry")

    if user_id:
        get_db()["cart_item"].delete_many({"user_id": user_id})

    logger.info("Order %s placed by %s for %.2f", order["order_number"], user_id or "guest", order["total"])
    return _orders_out([find_by_id("order", order_id)])[0]


@app.post("/orders", response_model=OrderOut)
def create_order(payload: CreateOrderInput, user: Dict[str, Any] = Depends(get_current_user)):
    return _place_order(user, payload)


@app.post("/orders/guest", response_model=OrderOut)
def create_guest_order(payload: CreateOrderInput):
    return _place_order(None, payload)


@app.get("/orders", response_model=List[OrderOut], dependencies=[Depends(require_admin)])
def list_orders(status: Optional[OrderStatus] = None):
    filt = {"status": status.value} if status else {}
    return _orders_out(get_documents("order", filt, sort=[("created_at", -1)]))


@app.get("/orders/mine", response_model=List[OrderOut])
def my_orders(status: Optional[OrderStatus] = None, user: Dict[str, Any] = Depends(get_current_user)):
    filt: Dict[str, Any] = {"user_id": str(user["_id"])}
    if status:
        filt["status"] = status.value
    return _orders_out(get_documents("order", filt, sort=[("created_at", -1)]))


@app.get("/orders/stats", response_model=OrderStats, dependencies=[Depends(require_admin)])
def order_stats():
    orders = get_db()["order"]
    stats: Dict[str, Any] = {"total": orders.count_documents({})}
    for status in OrderStatus:
        stats[status.value.lower()] = orders.count_documents({"status": status.value})
    earning = [OrderStatus.SHIPPED.value, OrderStatus.DELIVERED.value]
    stats["total_revenue"] = round(sum(o.get("total", 0) for o in orders.find({"status": {"$in": earning}})), 2)
    return stats


@app.get("/orders/number/{order_number}", response_model=OrderOut)
def order_by_number(order_number: str):
    doc = get_db()["order"].find_one({"order_number": order_number})
    if not doc:
        raise HTTPException(status_code=404, detail=f"Order with number {order_number} not found")
    return _orders_out([doc])[0]


@app.get("/orders/{order_id}", response_model=OrderOut)
def get_order(order_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    doc = _get_order(order_id)
    if doc.get("user_id") != str(user["_id"]) and not is_admin(user):
        raise HTTPException(status_code=403, detail="Not allowed to view this order")
    return _orders_out([doc])[0]


@app.patch("/orders/{order_id}/status", response_model=OrderOut, dependencies=[Depends(require_admin)])
def update_order_status(order_id: str, payload: UpdateOrderStatusInput):
    doc = _get_order(order_id)
    updated = update_document("order", order_id, {"status": payload.status.value})
    logger.info("Order %s moved %s -> %s", doc["order_number"], doc["status"], payload.status.value)
    return _orders_out([updated])[0]


# ---------- Admin dashboard ----------

@app.get("/admin/dashboard", response_model=Dashboard, dependencies=[Depends(require_admin)])
def dashboard():
    db = get_db()
    products = get_documents("product")
    categories = _category_map()
    return {
        "total_revenue": round(sum(o.get("total", 0) for o in db["order"].find({}, {"total": 1})), 2),
        "total_orders": db["order"].count_documents({}),
        "total_products": len(products),
        "total_users": db["user"].count_documents({}),
        "low_stock_products": [_product_out(p, categories) for p in low_stock(products, LOW_STOCK_THRESHOLD)],
        "recent_orders": _orders_out(get_documents("order", sort=[("created_at", -1)], limit=5)),
    }


# ---------- Seed Data ----------

SEED_PASSWORD = "password123"

SEED_CATEGORIES = [
    {"name": "Electronics", "name_en": "Electronics", "name_ar": "إلكترونيات", "description": "Latest technology and electronic devices"},
    {"name": "Furniture", "name_en": "Furniture", "name_ar": "أثاث", "description": "Home and office furniture"},
    {"name": "Kitchen", "name_en": "Kitchen", "name_ar": "مطبخ", "description": "Kitchen appliances and accessories"},
    {"name": "Fashion", "name_en": "Fashion", "name_ar": "أزياء", "description": "Clothing and fashion accessories"},
    {"name": "Sports", "name_en": "Sports", "name_ar": "رياضة", "description": "Sports and fitness equipment"},
]

SEED_USERS = [
    {"email": "admin@ecommerce.com", "name": "Admin User", "role": Role.ADMIN.value},
    {"email": "john@example.com", "name": "John Smith", "role": Role.CLIENT.value},
    {"email": "ahmed@example.com", "name": "أحمد محمد العلي", "name_en": "Ahmed Mohammed Al-Ali", "role": Role.CLIENT.value},
]

SEED_PRODUCTS = [
    ("Electronics", "Premium Wireless Headphones", "سماعات لاسلكية متميزة", 199.99, 15, True,
     "High-quality wireless headphones with noise cancellation and premium sound quality.",
     "سماعات لاسلكية عالية الجودة مع إلغاء الضوضاء وجودة صوت متميزة.",
     "https://images.pexels.com/photos/3394650/pexels-photo-3394650.jpeg"),
    ("Electronics", "Smart Fitness Watch", "ساعة ذكية للياقة البدنية", 299.99, 22, True,
     "Advanced smartwatch for fitness tracking with heart rate monitor and GPS.",
     "ساعة ذكية متقدمة لتتبع اللياقة البدنية مع مراقب معدل ضربات القلب و GPS.",
     "https://images.pexels.com/photos/437037/pexels-photo-437037.jpeg"),
    ("Electronics", "Smartphone 256GB", "هاتف ذكي 256 جيجابايت", 899.99, 8, False,
     "Latest smartphone with cutting-edge technology and premium design.",
     "أحدث هاتف ذكي بتقنية متطورة وتصميم فاخر.",
     "https://images.pexels.com/photos/699122/pexels-photo-699122.jpeg"),
    ("Furniture", "Ergonomic Office Chair", "كرسي مكتب مريح", 349.99, 8, False,
     "Comfortable ergonomic chair designed for long working hours.",
     "كرسي مريح مصمم لساعات العمل الطويلة.",
     "https://images.pexels.com/photos/1957477/pexels-photo-1957477.jpeg"),
    ("Furniture", "Modern Sofa Set", "طقم كنب عصري", 1299.99, 3, True,
     "Elegant modern sofa set for your living room.",
     "طقم كنب عصري أنيق لغرفة المعيشة.",
     "https://images.pexels.com/photos/1866149/pexels-photo-1866149.jpeg"),
    ("Kitchen", "Premium Coffee Maker", "صانعة قهوة متميزة", 189.99, 12, False,
     "Brew barista-quality coffee at home.",
     "حضّر قهوة بجودة المقاهي في المنزل.",
     "https://images.pexels.com/photos/324028/pexels-photo-324028.jpeg"),
    ("Kitchen", "Stainless Steel Cookware Set", "طقم أواني طهي من الستانلس ستيل", 249.99, 6, True,
     "Durable stainless steel cookware for every kitchen.",
     "أواني طهي متينة من الستانلس ستيل لكل مطبخ.",
     "https://images.pexels.com/photos/6996085/pexels-photo-6996085.jpeg"),
    ("Fashion", "Luxury Leather Jacket", "جاكيت جلد فاخر", 449.99, 10, False,
     "Genuine leather jacket with a timeless cut.",
     "جاكيت من الجلد الطبيعي بقصة كلاسيكية.",
     "https://images.pexels.com/photos/1124468/pexels-photo-1124468.jpeg"),
    ("Sports", "Professional Yoga Mat", "حصيرة يوغا احترافية", 89.99, 25, False,
     "Non-slip yoga mat for home and studio workouts.",
     "حصيرة يوغا مانعة للانزلاق للتمارين في المنزل والاستوديو.",
     "https://images.pexels.com/photos/4056535/pexels-photo-4056535.jpeg"),
]

# (order number, customer email, customer name, address, status, [(product name, quantity)])
SEED_ORDERS = [
    ("ORD-001", "john@example.com", "John Smith", "123 Main St, New York, NY 10001",
     OrderStatus.PROCESSING, [("Premium Wireless Headphones", 1)]),
    ("ORD-002", "ahmed@example.com", "أحمد محمد العلي", "شارع الملك فهد، الرياض",
     OrderStatus.SHIPPED, [("Smart Fitness Watch", 1)]),
    ("ORD-003", "guest@example.com", "Guest Customer", "456 Oak Ave, Los Angeles, CA 90001",
     OrderStatus.DELIVERED, [("Modern Sofa Set", 1), ("Stainless Steel Cookware Set", 1)]),
]


STORE_COLLECTIONS = ("order", "cart_item", "product", "category", "user")


@app.post("/seed")
def seed(req: SeedRequest, current: Optional[Dict[str, Any]] = Depends(optional_user)):
    """Fill an empty store with sample data. Only an admin may wipe and reseed."""
    db = get_db()
    if req.force:
        if not is_admin(current):
            raise HTTPException(status_code=403, detail="Admin access required to reseed")
        for name in STORE_COLLECTIONS:
            db[name].delete_many({})
        logger.warning("Store wiped for reseed by %s", current["email"])
    elif any(db[name].count_documents({}) > 0 for name in STORE_COLLECTIONS):
        return {"status": "ok", "message": "Already seeded"}

    category_ids = {c["name"]: create_document("category", c) for c in SEED_CATEGORIES}

    password_hash = hash_password(SEED_PASSWORD)
    user_ids = {}
    for u in SEED_USERS:
        record = dict(u, password_hash=password_hash, joined_at=now())
        user_ids[u["email"]] = create_document("user", record)

    products = {}
    for category, name, name_ar, price, stock, featured, description, description_ar, image in SEED_PRODUCTS:
        products[name] = {
            "id": create_document("product", {
                "name": name,
                "name_en": name,
                "name_ar": name_ar,
                "price": price,
                "description": description,
                "description_en": description,
                "description_ar": description_ar,
                "image": image,
                "images": [image],
                "stock": stock,
                "featured": featured,
                "active": True,
                "category_id": category_ids[category],
            }),
            "price": price,
        }

    for number, email, customer, address, status, lines in SEED_ORDERS:
        items = [
            {"id": str(ObjectId()), "product_id": products[p]["id"], "quantity": q, "price": products[p]["price"], "created_at": now()}
            for p, q in lines
        ]
        totals = cart_totals((it["price"], it["quantity"]) for it in items)
        totals.pop("item_count")
        create_document("order", {
            "order_number": number,
            "customer_name": customer,
            "customer_email": email,
            "shipping_address": address,
            "phone_number": None,
            "notes": None,
            "status": status.value,
            "user_id": user_ids.get(email),
            "items": items,
            **totals,
        })

    logger.info("Seeded %d categories, %d users, %d products, %d orders",
                len(SEED_CATEGORIES), len(SEED_USERS), len(SEED_PRODUCTS), len(SEED_ORDERS))
    return {"status": "ok", "seeded": len(SEED_PRODUCTS)}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=PORT)
