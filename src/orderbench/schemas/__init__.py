"""Schemas package re-exports for easy imports from `orderbench.schemas`."""
from .schemas import (
    MIN_QUANTITY,
    MAX_QUANTITY,
    MIN_ID,
    MAX_ID,
    Product,
    ProductBase,
    ProductList,
    UserCreate,
    OrderCreate,
    OrderConfirmation,
    OrderStatus,
    DatabaseStats,
    ServiceStatus,
)

__all__ = [
    "MIN_QUANTITY",
    "MAX_QUANTITY",
    "MIN_ID",
    "MAX_ID",
    "Product",
    "ProductBase",
    "ProductList",
    "UserCreate",
    "OrderCreate",
    "OrderConfirmation",
    "OrderStatus",
    "DatabaseStats",
    "ServiceStatus",
]
