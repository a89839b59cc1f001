"""Services package re-exports for easy imports from `orderbench.services`."""
from .orders import (
    OrderPlacementService,
    validate_order_request,
    OrderError,
    ValidationError,
    InsufficientStockOrNotFound,
    TransientStoreError,
)

__all__ = [
    "OrderPlacementService",
    "validate_order_request",
    "OrderError",
    "ValidationError",
    "InsufficientStockOrNotFound",
    "TransientStoreError",
]
