# Storefront services

from .auth_state import AuthState
from .lindo_client import (
    LindoClient,
    LindoClientError,
    LindoAPIError,
    LindoNetworkError,
    NotAuthenticatedError,
)
from .cart import CartService
from .wishlist import WishlistService
from .reconciliation import CartReconciler, WishlistReconciler, ReconcileState, ReconcileResult
from .account import AccountService
from .checkout import CheckoutService, format_rwf, format_price
from .admin_gate import AdminGate

__all__ = [
    "AuthState",
    "LindoClient",
    "LindoClientError",
    "LindoAPIError",
    "LindoNetworkError",
    "NotAuthenticatedError",
    "CartService",
    "WishlistService",
    "CartReconciler",
    "WishlistReconciler",
    "ReconcileState",
    "ReconcileResult",
    "AccountService",
    "CheckoutService",
    "format_rwf",
    "format_price",
    "AdminGate",
]
