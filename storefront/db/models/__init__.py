"""
Domain-split SQLAlchemy models with an aggregator.

Exposes `Base`, `now_utc`, and all ORM classes.
"""

from .base import Base, now_utc  # re-export

from .users import User
from .catalog import Category, Product
from .cart import CartItem
from .orders import Order, OrderItem
from .audit import AuditLog

__all__ = [
    "Base",
    "now_utc",
    "User",
    "Category",
    "Product",
    "CartItem",
    "Order",
    "OrderItem",
    "AuditLog",
]
