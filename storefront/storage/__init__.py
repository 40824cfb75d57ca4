# Device storage

from .browser import BrowserStorage
from .local_store import LocalStore, cart_key, wishlist_key

__all__ = ["BrowserStorage", "LocalStore", "cart_key", "wishlist_key"]
