# Mock Backend Models

from .product import Product, Category
from .cart import CartLine, AddToCartRequest, CartItemRequest, WishlistRequest
from .order import (
    Order,
    OrderItem,
    OrderRequest,
    OrderStatus,
    DPOInitializeRequest,
    DPOVerifyRequest,
    Payment,
)
from .user import User, LoginRequest

__all__ = [
    "Product",
    "Category",
    "CartLine",
    "AddToCartRequest",
    "CartItemRequest",
    "WishlistRequest",
    "Order",
    "OrderItem",
    "OrderRequest",
    "OrderStatus",
    "DPOInitializeRequest",
    "DPOVerifyRequest",
    "Payment",
    "User",
    "LoginRequest",
]
