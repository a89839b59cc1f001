from pydantic import BaseModel, ConfigDict, Field, StrictInt
from typing import Optional
from datetime import datetime
from decimal import Decimal
from ..models import OrderStatus  # Import from models, not define locally

MIN_QUANTITY = 1
MAX_QUANTITY = 100

# ids are stored in 32-bit Integer columns
MIN_ID = 1
MAX_ID = 2**31 - 1


class ProductBase(BaseModel):
    sku: str = Field(..., max_length=64)
    name: str = Field(..., max_length=200)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    stock: int = Field(0, ge=0)


class Product(ProductBase):
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "sku": "SKU-000001",
                "name": "Example Widget",
                "description": "A widget for benchmarking.",
                "price": "19.99",
                "stock": 100,
                "created_at": "2024-01-01T12:00:00",
                "updated_at": "2024-01-01T12:00:00",
            }
        },
    )


class ProductList(BaseModel):
    items: list[Product]
    page: int
    per_page: int
    total: int
    last_page: int

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "items": [Product.model_config["json_schema_extra"]["example"]],
                "page": 1,
                "per_page": 20,
                "total": 1,
                "last_page": 1,
            }
        }
    )


class UserCreate(BaseModel):
    name: str = Field(..., max_length=255)
    email: str = Field(..., max_length=255)
    password: str


class OrderCreate(BaseModel):
    user_id: StrictInt = Field(..., ge=MIN_ID, le=MAX_ID)
    product_id: StrictInt = Field(..., ge=MIN_ID, le=MAX_ID)
    quantity: StrictInt = Field(..., ge=MIN_QUANTITY, le=MAX_QUANTITY)

    model_config = ConfigDict(
        json_schema_extra={"example": {"user_id": 1, "product_id": 1, "quantity": 3}},
    )


class OrderConfirmation(BaseModel):
    id: int
    user_id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    status: OrderStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "user_id": 1,
                "product_id": 1,
                "quantity": 3,
                "unit_price": "19.99",
                "total_price": "59.97",
                "status": "paid",
                "created_at": "2024-01-01T12:00:00",
                "updated_at": "2024-01-01T12:00:00",
            }
        },
    )


class DatabaseStats(BaseModel):
    users: int
    products: int
    orders: int
    products_in_stock: int


class ServiceStatus(BaseModel):
    driver: str
    database_version: str
    stats: Optional[DatabaseStats]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "driver": "postgresql",
                "database_version": "16.2",
                "stats": {"users": 1001, "products": 2000, "orders": 1000, "products_in_stock": 1996},
            }
        }
    )
