# Storefront Routes

from .auth import router as auth_router
from .cart import router as cart_router
from .wishlist import router as wishlist_router
from .catalog import router as catalog_router
from .checkout import router as checkout_router
from .admin import router as admin_router

__all__ = [
    "auth_router",
    "cart_router",
    "wishlist_router",
    "catalog_router",
    "checkout_router",
    "admin_router",
]
