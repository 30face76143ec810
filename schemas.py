"""
Database and API Schemas

Input models validate request bodies; output models shape documents read
from MongoDB. All models speak camelCase on the wire (productId,
customerName, accessToken, ...) and snake_case in Python and storage.

Collections:
- User -> "user"
- Category -> "category"
- Product -> "product"
- CartItem -> "cart_item"
- Order -> "order" (order items are embedded)
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Role(str, Enum):
    ADMIN = "ADMIN"
    CLIENT = "CLIENT"


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PriceRange(str, Enum):
    ALL = "all"
    UNDER_50 = "under50"
    FROM_50_TO_200 = "50to200"
    OVER_200 = "over200"


# ---------- Auth & Users ----------

class LoginInput(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)
    next: Optional[str] = Field(None, description="Route the user was sent away from")


class RegisterInput(CamelModel):
    email: EmailStr
    # bcrypt only looks at the first 72 bytes
    password: str = Field(..., min_length=8, max_length=72)
    name: str = Field(..., min_length=1)
    name_en: Optional[str] = None
    avatar: Optional[str] = None


class CreateUserInput(RegisterInput):
    role: Role = Role.CLIENT


class UpdateUserInput(CamelModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=8, max_length=72)
    name: Optional[str] = Field(None, min_length=1)
    name_en: Optional[str] = None
    avatar: Optional[str] = None
    role: Optional[Role] = None


class UserOut(CamelModel):
    id: str
    email: str
    name: str
    name_en: Optional[str] = None
    role: Role
    avatar: Optional[str] = None
    joined_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AuthPayload(CamelModel):
    access_token: str
    user: UserOut
    redirect_to: str = "/"


# ---------- Catalog ----------

class CreateCategoryInput(CamelModel):
    name: str = Field(..., min_length=1)
    name_en: Optional[str] = None
    name_ar: Optional[str] = None
    description: Optional[str] = None


class CategoryCount(CamelModel):
    products: int = 0


class CategoryOut(CamelModel):
    id: str
    name: str
    name_en: Optional[str] = None
    name_ar: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    count: Optional[CategoryCount] = Field(None, alias="_count")


class CreateProductInput(CamelModel):
    name: str = Field(..., min_length=1)
    name_en: Optional[str] = None
    name_ar: Optional[str] = None
    price: float = Field(..., ge=0)
    description: str
    description_en: Optional[str] = None
    description_ar: Optional[str] = None
    image: str
    images: List[str] = Field(default_factory=list)
    stock: int = Field(0, ge=0)
    featured: bool = False
    active: bool = True
    category_id: Optional[str] = None


class UpdateProductInput(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    name_en: Optional[str] = None
    name_ar: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None
    description_en: Optional[str] = None
    description_ar: Optional[str] = None
    image: Optional[str] = None
    images: Optional[List[str]] = None
    stock: Optional[int] = Field(None, ge=0)
    featured: Optional[bool] = None
    active: Optional[bool] = None
    category_id: Optional[str] = None


class UpdateStockInput(CamelModel):
    quantity: int = Field(..., description="Signed change applied to the current stock")


class ProductOut(CamelModel):
    id: str
    name: str
    name_en: Optional[str] = None
    name_ar: Optional[str] = None
    price: float
    description: str = ""
    description_en: Optional[str] = None
    description_ar: Optional[str] = None
    image: str = ""
    images: List[str] = Field(default_factory=list)
    stock: int = 0
    featured: bool = False
    active: bool = True
    category_id: Optional[str] = None
    category: Optional[CategoryOut] = None
    price_display: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ---------- Cart ----------

class AddToCartInput(CamelModel):
    product_id: str
    quantity: int = Field(1, ge=1)


class UpdateCartItemInput(CamelModel):
    quantity: int = Field(..., ge=1)


class CartItemOut(CamelModel):
    id: str
    quantity: int
    user_id: str
    product_id: str
    product: Optional[ProductOut] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CartTotals(CamelModel):
    subtotal: float = 0.0
    tax: float = 0.0
    shipping: float = 0.0
    total: float = 0.0
    item_count: int = 0


class CartOut(CartTotals):
    items: List[CartItemOut] = Field(default_factory=list)


# ---------- Orders ----------

class OrderItemInput(CamelModel):
    product_id: str
    quantity: int = Field(..., ge=1)


class CreateOrderInput(CamelModel):
    customer_name: str = Field(..., min_length=1)
    customer_email: EmailStr
    shipping_address: str = Field(..., min_length=1)
    phone_number: Optional[str] = None
    notes: Optional[str] = None
    items: List[OrderItemInput] = Field(..., min_length=1)


class UpdateOrderStatusInput(CamelModel):
    status: OrderStatus


class OrderItemOut(CamelModel):
    id: str
    quantity: int
    price: float
    product_id: str
    product: Optional[ProductOut] = None
    created_at: Optional[datetime] = None


class OrderOut(CamelModel):
    id: str
    order_number: str
    subtotal: float = 0.0
    tax: float = 0.0
    shipping: float = 0.0
    total: float
    status: OrderStatus
    customer_name: str
    customer_email: str
    shipping_address: str
    phone_number: Optional[str] = None
    notes: Optional[str] = None
    user_id: Optional[str] = None
    user: Optional[UserOut] = None
    items: List[OrderItemOut] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrderStats(CamelModel):
    total: int = 0
    pending: int = 0
    processing: int = 0
    shipped: int = 0
    delivered: int = 0
    cancelled: int = 0
    total_revenue: float = 0.0


class Dashboard(CamelModel):
    total_revenue: float = 0.0
    total_orders: int = 0
    total_products: int = 0
    total_users: int = 0
    low_stock_products: List[ProductOut] = Field(default_factory=list)
    recent_orders: List[OrderOut] = Field(default_factory=list)


class SeedRequest(BaseModel):
    force: bool = False
