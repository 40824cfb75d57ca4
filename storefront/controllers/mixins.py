"""Behaviour shared by pages that list products"""

import logging
from typing import Optional

from ..models.catalog import Product
from ..services import cart as cart_ops
from ..services import wishlist as wishlist_ops
from ..services.cart import CartService
from ..services.lindo_client import LindoClientError
from ..services.wishlist import WishlistService

logger = logging.getLogger(__name__)


class WishlistToggleMixin:
    """Optimistic heart-icon toggle"""

    wishlist: WishlistService
    wishlist_ids: list[str]

    async def load_wishlist_ids(self) -> list[str]:
        """Wishlist ids for heart icons; failures leave every heart empty"""
        try:
            return await self.wishlist.load_ids()
        except LindoClientError as e:
            logger.warning(f"Wishlist unavailable: {e}")
            return []

    async def toggle_wishlist(self, product_id: str) -> bool:
        product_id = str(product_id)
        previous = list(self.wishlist_ids)
        updated: Optional[list[str]] = None

        async def action():
            nonlocal updated
            updated = await self.wishlist.toggle(product_id, previous)

        ok = await self.optimistic(
            apply=lambda: setattr(self, "wishlist_ids", wishlist_ops.toggle(previous, product_id)),
            revert=lambda: setattr(self, "wishlist_ids", previous),
            action=action,
            failure_message="Failed to update wishlist. Please try again.",
        )
        if ok and updated is not None:
            self.wishlist_ids = updated
        return ok

    def is_wishlisted(self, product_id: str) -> bool:
        return str(product_id) in self.wishlist_ids


class AddToCartMixin:
    """Add-to-cart button on product cards"""

    cart: CartService
    toast: Optional[str]

    async def add_product_to_cart(self, product: Product, quantity: int = 1) -> bool:
        item = cart_ops.item_from_product(product, quantity)
        try:
            await self.cart.add(item)
        except LindoClientError as e:
            logger.warning(f"Add to cart failed for {product.id}: {e}")
            self.toast = "Failed to add to cart. Please try again."
            return False
        self.toast = f"{product.name} added to cart!"
        return True
