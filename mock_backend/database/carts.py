"""Server-side carts for the mock backend"""

import logging
from typing import Optional

from ..models.cart import CartLine

logger = logging.getLogger(__name__)


class CartDatabase:
    """In-memory carts keyed by user id"""

    def __init__(self):
        self.carts: dict[str, list[CartLine]] = {}

    def reset(self) -> None:
        self.carts = {}

    def get_cart(self, user_id: str) -> list[CartLine]:
        """Get a user's cart (empty when none exists yet)"""
        return self.carts.setdefault(user_id, [])

    def get_line(self, user_id: str, product_id: str) -> Optional[CartLine]:
        return next((line for line in self.get_cart(user_id) if line.product_id == product_id), None)

    def add_item(self, user_id: str, product_id: str, quantity: int = 1) -> list[CartLine]:
        """Add an item; a product already in the cart has its quantity increased"""
        line = self.get_line(user_id, product_id)
        if line:
            line.quantity += quantity
        else:
            self.get_cart(user_id).append(CartLine(product_id=product_id, quantity=quantity))
        return self.get_cart(user_id)

    def update_item_quantity(self, user_id: str, product_id: str, quantity: int) -> Optional[list[CartLine]]:
        """Set a line's quantity; ``None`` when the product is not in the cart"""
        line = self.get_line(user_id, product_id)
        if not line:
            return None

        if quantity <= 0:
            return self.remove_item(user_id, product_id)
        line.quantity = quantity
        return self.get_cart(user_id)

    def reduce_item(self, user_id: str, product_id: str) -> Optional[list[CartLine]]:
        """Lower a line's quantity by one, dropping the line at zero"""
        line = self.get_line(user_id, product_id)
        if not line:
            return None
        return self.update_item_quantity(user_id, product_id, line.quantity - 1)

    def remove_item(self, user_id: str, product_id: str) -> list[CartLine]:
        self.carts[user_id] = [line for line in self.get_cart(user_id) if line.product_id != product_id]
        return self.carts[user_id]

    def clear_cart(self, user_id: str) -> list[CartLine]:
        self.carts[user_id] = []
        return self.carts[user_id]


# Singleton instance
cart_db = CartDatabase()
