"""Models package re-exports for easy imports from `orderbench.models`."""
from .models import Base, User, Product, Order, OrderStatus

__all__ = ["Base", "User", "Product", "Order", "OrderStatus"]
