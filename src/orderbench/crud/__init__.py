"""CRUD package re-exports for easy imports from `orderbench.crud`."""
from .crud import (
    PRODUCT_SORTS,
    hash_password,
    user_exists,
    create_user,
    get_product,
    get_product_stock,
    get_products,
    count_products,
    get_order,
    database_version,
    database_stats,
    reset_database,
)

__all__ = [
    "PRODUCT_SORTS",
    "hash_password",
    "user_exists",
    "create_user",
    "get_product",
    "get_product_stock",
    "get_products",
    "count_products",
    "get_order",
    "database_version",
    "database_stats",
    "reset_database",
]
