# Storefront models

from .cart import CartItem
from .catalog import Product, Category
from .checkout import CheckoutForm, OrderItem, OrderRequest, CheckoutOutcome

__all__ = [
    "CartItem",
    "Product",
    "Category",
    "CheckoutForm",
    "OrderItem",
    "OrderRequest",
    "CheckoutOutcome",
]
