# Page controllers

from .base import PageController, PageState
from .cart_page import CartPage
from .wishlist_page import WishlistPage
from .catalog_pages import ProductPage, CategoryPage
from .search_page import SearchPage
from .checkout_page import CheckoutPage
from .header import HeaderBadges

__all__ = [
    "PageController",
    "PageState",
    "CartPage",
    "WishlistPage",
    "ProductPage",
    "CategoryPage",
    "SearchPage",
    "CheckoutPage",
    "HeaderBadges",
]
