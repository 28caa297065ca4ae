"""
Domain-split Pydantic schemas with an aggregator.
"""

from .common import MAX_DB_INT, ApiModel, ApiResponse, Pagination, Paginated
from .users import (
    RegisterRequest,
    LoginRequest,
    ProfileUpdate,
    UserPublic,
    UserProfile,
    AuthPayload,
    AdminUserUpdate,
)
from .catalog import (
    CategoryRef,
    CategoryCount,
    ProductSummary,
    Product,
    ProductCreate,
    ProductUpdate,
    Category,
    CategoryDetail,
    CategoryCreate,
    CategoryUpdate,
)
from .cart import CartItem, Cart, CartItemCreate, CartItemUpdate, CartMergeEntry, CartMergeRequest
from .orders import OrderItem, Order, OrderCreate, OrderStatusUpdate
from .audits import AuditLogCreate, AuditLog, AdminStats

__all__ = [
    "MAX_DB_INT",
    "ApiModel",
    "ApiResponse",
    "Pagination",
    "Paginated",
    # users/auth
    "RegisterRequest",
    "LoginRequest",
    "ProfileUpdate",
    "UserPublic",
    "UserProfile",
    "AuthPayload",
    "AdminUserUpdate",
    # catalog
    "CategoryRef",
    "CategoryCount",
    "ProductSummary",
    "Product",
    "ProductCreate",
    "ProductUpdate",
    "Category",
    "CategoryDetail",
    "CategoryCreate",
    "CategoryUpdate",
    # cart
    "CartItem",
    "Cart",
    "CartItemCreate",
    "CartItemUpdate",
    "CartMergeEntry",
    "CartMergeRequest",
    # orders
    "OrderItem",
    "Order",
    "OrderCreate",
    "OrderStatusUpdate",
    # audit/admin
    "AuditLogCreate",
    "AuditLog",
    "AdminStats",
]
