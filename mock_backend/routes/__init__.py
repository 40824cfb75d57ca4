# API Routes

from .products import router as products_router
from .cart import router as cart_router
from .wishlist import router as wishlist_router
from .orders import router as orders_router
from .user import router as user_router
from .auth import router as auth_router

__all__ = [
    "products_router",
    "cart_router",
    "wishlist_router",
    "orders_router",
    "user_router",
    "auth_router",
]
