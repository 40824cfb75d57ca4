# Database modules

from .products import product_db, ProductDatabase
from .carts import cart_db, CartDatabase
from .wishlists import wishlist_db, WishlistDatabase
from .orders import order_db, OrderDatabase
from .users import user_db, UserDatabase, EmailExistsError


def reset_all() -> None:
    """Restore every store to its seeded state"""
    for db in (product_db, cart_db, wishlist_db, order_db, user_db):
        db.reset()


__all__ = [
    "product_db",
    "ProductDatabase",
    "cart_db",
    "CartDatabase",
    "wishlist_db",
    "WishlistDatabase",
    "order_db",
    "OrderDatabase",
    "user_db",
    "UserDatabase",
    "EmailExistsError",
    "reset_all",
]
